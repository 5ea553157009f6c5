APP_TITLE = "Test Case Analytics"
APP_SUBTITLE = "Enterprise Quality Dashboard"
MAJOR_VERSION = 1
BUILD_VERSION = "1.0.0"
