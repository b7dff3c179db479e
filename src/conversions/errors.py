"""Typed exceptions for unit conversion errors."""

from src.store_client.errors import RecipeTimersError


class ConversionError(RecipeTimersError):
    """Base exception for all unit conversion errors."""
    pass


class UnknownCategoryError(ConversionError):
    """Raised when a category key is not in the registry."""

    def __init__(self, category: str):
        super().__init__(f"Unknown conversion category '{category}'")
        self.category = category


class ImmutableOnceSavedError(ConversionError):
    """Raised when a saved converter would be modified or saved again."""

    def __init__(self, converter_id: str):
        super().__init__(
            f"Converter {converter_id} is saved; its category can no longer change"
        )
        self.converter_id = converter_id


class LastConverterProtectedError(ConversionError):
    """Raised when removing a converter would leave the page with none."""

    def __init__(self, converter_id: str):
        super().__init__(
            f"Cannot remove converter {converter_id}: at least one converter must remain"
        )
        self.converter_id = converter_id


class ConverterNotFoundError(ConversionError):
    """Raised when a converter id is not in the collection."""

    def __init__(self, converter_id: str):
        super().__init__(f"Converter {converter_id} not found")
        self.converter_id = converter_id


class SaveRejectedError(ConversionError):
    """Raised when the page store refuses to save a converter."""

    def __init__(self, converter_id: str, reason: str):
        super().__init__(f"Failed to save converter {converter_id}: {reason}")
        self.converter_id = converter_id
        self.reason = reason
