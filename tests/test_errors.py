from pyinicfg import errors


def test_error_buffer_appends_without_duplicates():
    assert not errors.is_error()
    errors.append_error_message("first")
    errors.append_error_message("second")
    errors.append_error_message("first")
    assert errors.is_error()
    assert errors.error_message() == "first\nsecond"


def test_empty_message_clears_buffer():
    errors.append_error_message("oops")
    errors.append_error_message("")
    assert not errors.is_error()
    assert errors.error_message() == ""


def test_error_hierarchy():
    assert issubclass(errors.SpecLoadError, errors.InicfgError)
