"""
Configuration constants for Bard.
"""

# Defaults for the CLI
DEFAULT_MODEL = "llama3.1"
DEFAULT_TITLE = "My AI Generated Story"
DEFAULT_ENV_FILE = ".env"
DEFAULT_TEMPLATE = "output.template"

# Completion limits (tokens)
MAX_TOKENS = 1024 * 4
MIN_LENGTH = 1024 * 2

# Story structure: opening + at least two continuations + closing
MIN_PARTS = 4
DEFAULT_PARTS = 4

# Working directories (relative to the working root)
MD_DIR = "md"
PLOTS_DIR = "plots"
HTML_DIR = "html"
LOGS_DIR = "logs"

# Single body placeholder in the output template
TEMPLATE_PLACEHOLDER = "%s"

# Random seed upper bound (int32 keeps every backend happy)
MAX_SEED = 2 ** 31 - 1

# Ollama settings
OLLAMA_HOST = "localhost"
OLLAMA_PORT = 11434
OLLAMA_GENERATE_ENDPOINT = "/api/generate"
OLLAMA_TIMEOUT = 600

# Exit codes
EXIT_SUCCESS = 0
EXIT_FATAL = 1
