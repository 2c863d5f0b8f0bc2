from ldtkit.export.ldt_writer import LDTWriteError, dumps_ldt, encode_ldt, write_ldt

__all__ = [
    "LDTWriteError",
    "dumps_ldt",
    "encode_ldt",
    "write_ldt",
]
