"""
Configuration settings for the AcroForm schema extraction engine.
Consolidates all constants and configuration in one place.
"""

# Field-Name Convention
# section_fieldname_optiontype[_optionvalue]
FIELD_NAME_SEPARATOR = "_"
OPTION_TYPES = (
    "radio", "checkbox", "select", "bool", "boolean", "text",
    "textarea", "email", "phone", "zipcode", "ein", "date",
)
DEFAULT_SECTION = "general"

# Section Assembly
COLLAPSED_SECTION_TITLE = "Form Fields"

# Extraction
DEFAULT_BACKEND = "pypdf"  # or "pymupdf"
SUPPORTED_BACKENDS = ("pypdf", "pymupdf")

# AcroForm field flags (PDF 32000-1, table 226/228/230), as bit masks
FF_MULTILINE = 1 << 12
FF_RADIO = 1 << 15
FF_PUSHBUTTON = 1 << 16

# Fallback Templates
DEFAULT_FALLBACK_VARIANT = "current"  # or "legacy"

# Logging Configuration
LOGGER_NAME = "acroform_schema"
LOG_FILE_PARSE = "form_parse.log"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# Error Messages
ERROR_MESSAGES = {
    'not_pdf': 'Not a PDF file',
    'encrypted_pdf': 'Encrypted PDF not supported',
    'parse_failed': 'Failed to parse PDF',
    'no_fields': 'PDF has no fillable form fields',
    'structural_error': 'Failed to structure extracted form fields',
}
