from docchat.extractors.unsupported import describe_unsupported


class TestDescribeUnsupported:
    def test_names_file_and_type(self) -> None:
        assert describe_unsupported("a.zip", "application/zip") == (
            "File: a.zip attached. Type: application/zip. Text extraction not supported."
        )
