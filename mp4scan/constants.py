# Box tags
BOX_MOOV = b"moov"
BOX_MVHD = b"mvhd"

# Box header layout
HEADER_SIZE = 8
LARGE_HEADER_SIZE = 16
LARGE_SIZE_MARKER = 1  # 32-bit size field value announcing a 64-bit size

# mvhd payload layout
MVHD_FLAGS_SIZE = 3
MVHD_V0_TIMES_SIZE = 8   # creation + modification time, 4 bytes each
MVHD_V1_TIMES_SIZE = 16  # creation + modification time, 8 bytes each

# Files handed to the box parser
MP4_EXTENSION = "mp4"

# Display
DEFAULT_PATH_WIDTH = 90
COLOR_YELLOW = "\033[33m"
COLOR_GREEN = "\033[32m"
COLOR_RESET = "\033[0m"
