from .titleformat import CompiledFormat, TitleFormatError, compile_format

__all__ = ["CompiledFormat", "TitleFormatError", "compile_format"]
