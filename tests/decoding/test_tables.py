from i8086.decoding import tables


def test_register_table_shape() -> None:
    assert len(tables.REG_BYTE_NAMES) == 8
    assert len(tables.REG_WORD_NAMES) == 8
    assert len(set(tables.REG_BYTE_NAMES + tables.REG_WORD_NAMES)) == 16


def test_register_columns_name_different_registers() -> None:
    assert tables.register_name(0, 0) == "al"
    assert tables.register_name(0, 1) == "ax"
    assert tables.register_name(4, 0) == "ah"
    assert tables.register_name(4, 1) == "sp"
    assert tables.register_name(7, 0) == "bh"
    assert tables.register_name(7, 1) == "di"


def test_effective_address_table() -> None:
    assert tables.effective_address(0) == "bx + si"
    assert tables.effective_address(3) == "bp + di"
    assert tables.effective_address(6) == "bp"
    assert tables.effective_address(7) == "bx"


def test_reverse_lookups() -> None:
    assert tables.REGISTER_IDS["sp"] == (4, 1)
    assert tables.REGISTER_IDS["ah"] == (4, 0)
    assert tables.EFFECTIVE_ADDRESS_IDS["bp + si"] == 2
    assert len(tables.REGISTER_IDS) == 16
    assert len(tables.EFFECTIVE_ADDRESS_IDS) == 8
