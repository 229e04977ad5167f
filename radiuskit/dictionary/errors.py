"""Errors raised while reading or combining dictionaries."""

from __future__ import annotations

from .types import Attribute, Vendor


class DictionaryError(Exception):
    """Base class for dictionary errors."""


class ParseError(DictionaryError):
    """A problem found at a given line of a dictionary file."""

    def __init__(self, inner: BaseException | None, filename: str, line: int) -> None:
        self.inner = inner
        self.filename = filename
        self.line = line
        message = f"dictionary: parse error in {filename}:{line}"
        if inner is not None:
            message += f": {inner}"
        super().__init__(message)


class DuplicateAttributeError(DictionaryError):
    def __init__(self, attribute: Attribute) -> None:
        self.attribute = attribute
        super().__init__(f'duplicate attribute "{attribute.name}"')


class UnknownAttributeTypeError(DictionaryError):
    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f'unknown attribute type "{type_name}"')


class DuplicateAttributeFlagError(DictionaryError):
    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f'duplicate attribute flag "{flag}"')


class UnknownAttributeFlagError(DictionaryError):
    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f'unknown attribute flag "{flag}"')


class InvalidAttributeEncryptTypeError(DictionaryError):
    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f'invalid attribute encrypt type "{type_name}"')


class UnknownLineError(DictionaryError):
    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__("unknown line")


class InvalidVendorFormatError(DictionaryError):
    def __init__(self, format_spec: str) -> None:
        self.format_spec = format_spec
        super().__init__(f'invalid vendor format "{format_spec}"')


class UnknownVendorError(DictionaryError):
    def __init__(self, vendor: str) -> None:
        self.vendor = vendor
        super().__init__(f'unknown vendor "{vendor}"')


class UnmatchedEndVendorError(DictionaryError):
    def __init__(self) -> None:
        super().__init__("unmatched END-VENDOR")


class InvalidEndVendorError(DictionaryError):
    def __init__(self, vendor: str) -> None:
        self.vendor = vendor
        super().__init__(f'invalid END-VENDOR "{vendor}"')


class BeginVendorIncludeError(DictionaryError):
    def __init__(self) -> None:
        super().__init__("invalid $INCLUDE inside BEGIN-VENDOR block")


class UnclosedVendorBlockError(DictionaryError):
    def __init__(self) -> None:
        super().__init__("unclosed BEGIN-VENDOR block")


class RecursiveIncludeError(DictionaryError):
    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f'file already included "{filename}"')


class DuplicateVendorError(DictionaryError):
    def __init__(self, vendor: Vendor) -> None:
        self.vendor = vendor
        super().__init__(f'duplicate vendor "{vendor.name}" ({vendor.number})')


class NestedVendorBlockError(DictionaryError):
    def __init__(self) -> None:
        super().__init__("invalid BEGIN-VENDOR inside vendor block")


class InvalidOIDError(DictionaryError):
    def __init__(self, oid: str) -> None:
        self.oid = oid
        super().__init__(f'invalid OID "{oid}"')