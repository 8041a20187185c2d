# Namespace for pipeline steps
from .validate_founders import ValidateFounders  # noqa: F401
from .import_founders import ImportFounders  # noqa: F401
from .preview_duplicates import PreviewDuplicates  # noqa: F401
