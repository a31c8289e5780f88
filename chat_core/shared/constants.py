"""
Application Constants

Defines constants used throughout the chat core.
"""

# Protocol constants
MESSAGE_DELIMITER = b'\n'
PROTOCOL_SEPARATOR = ':'
PROTOCOL_ENCODING = 'utf-8'

# Wire tags
JOIN_TAG = "iam"
MESSAGE_TAG = "msg"

# Default network settings
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 80

# Buffer and limit constants
DEFAULT_BUFFER_SIZE = 4096
DEFAULT_MAX_FRAME_SIZE = 64 * 1024
MAX_MESSAGE_HISTORY = 2000

# Timing constants
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_WRITE_TIMEOUT = 5.0
READER_JOIN_TIMEOUT = 2.0

# Command constants
QUIT_COMMAND = "/quit"

# Log format constants
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
