from typing import ClassVar, Tuple


class SheetModel:
    """
    Layout of one sheet in the workbook.
    - __sheetname__: exact sheet (tab) name
    - columns: fixed write order, the header row of a fresh sheet
    """
    __sheetname__: ClassVar[str] = ""
    columns: ClassVar[Tuple[str, ...]] = ()
