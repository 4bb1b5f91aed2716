"""
Validation errors raised before any packing begins.
"""


class LayoutError(ValueError):
	pass


class InvalidDimensionError(LayoutError):
	pass


class InvalidQuantityError(LayoutError):
	pass


class UnknownSheetSizeError(LayoutError):
	pass


class MissingArtworkError(LayoutError):
	pass
