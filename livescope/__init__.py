"""LiveScope - real-time system performance art in the terminal"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
