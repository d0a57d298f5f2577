from netproc.pid import MAX_DIGITS_UINT32, max_pid_digits


def test_reads_digit_count(tmp_path):
    path = tmp_path / "pid_max"
    path.write_text("4194304\n")
    assert max_pid_digits(path) == len("4194304")


def test_leading_whitespace_is_skipped(tmp_path):
    path = tmp_path / "pid_max"
    path.write_text("  32768\n")
    assert max_pid_digits(str(path)) == len("32768")


def test_missing_file_gives_default(tmp_path):
    assert max_pid_digits(tmp_path / "absent") == MAX_DIGITS_UINT32


def test_empty_file_gives_default(tmp_path):
    path = tmp_path / "pid_max"
    path.write_text("")
    assert max_pid_digits(path) == MAX_DIGITS_UINT32


def test_long_value_is_capped(tmp_path):
    path = tmp_path / "pid_max"
    path.write_text("123456789012345\n")
    assert max_pid_digits(path) == MAX_DIGITS_UINT32