"""
Domain models — option, state and document types for mvnext.

All models are re-exported here for convenient access:

    from mvnext.core.models import Accumulator, ExtensionOptions, GeneratedFile
"""

from mvnext.core.models.accumulator import Accumulator
from mvnext.core.models.descriptor import ElementTemplate, Slot, TargetElementDescriptor
from mvnext.core.models.document import (
    FormatStyle,
    SourceDocument,
    detect_format_style,
    separators_to_unix,
)
from mvnext.core.models.generated import GeneratedFile
from mvnext.core.models.options import ExtensionOptions, PublishCriteria

__all__ = [
    # accumulator.py
    "Accumulator",
    # descriptor.py
    "ElementTemplate",
    "Slot",
    "TargetElementDescriptor",
    # document.py
    "FormatStyle",
    "SourceDocument",
    "detect_format_style",
    "separators_to_unix",
    # generated.py
    "GeneratedFile",
    # options.py
    "ExtensionOptions",
    "PublishCriteria",
]
