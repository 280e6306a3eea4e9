"""
Application constants
"""

# Storage
APP_DATA_DIR_NAME = "TodoApp"
DATA_FILE_NAME = "tasks.json"
JSON_INDENT = 2
FILE_ENCODING = "utf-8"

# Task defaults
NO_CATEGORIES_LABEL = "No categories"
CATEGORY_SEPARATOR = ", "

# Display
DUE_DATE_FORMAT = "%d.%m.%Y"
TITLE_PREVIEW_LENGTH = 50

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
