from dataclasses import dataclass
from typing import Optional


@dataclass
class TailConfig:
    # Seconds between metadata polls while waiting for new data
    poll: float = 0.25
    # Seconds to wait for a vanished path to reappear before end of stream
    eof_wait: float = 10.0
    # Upper bound (seconds) on the time a single read call may spend waiting;
    # None waits as long as the file keeps existing
    timeout: Optional[float] = None
    # Start at the end of the file on the first open (like `tail -f`)
    from_end: bool = False

