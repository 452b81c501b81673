import kcas


def test_version_is_exported():
    assert kcas.__version__ is None or isinstance(kcas.__version__, str)


def test_public_interface_is_complete():
    for name in kcas.__all__:
        assert hasattr(kcas, name)
