import unittest

from bitquery_client.util import get_package_version, is_valid_endpoint


class TestUtils(unittest.TestCase):
    def test_package_version_some(self):
        version_string = get_package_version("requests")
        parsed_version = list(map(int, version_string.split(".")[:2]))
        assert parsed_version >= [2, 28]

    def test_package_version_none(self):
        assert get_package_version("unittest") is None

    def test_is_valid_endpoint(self):
        assert is_valid_endpoint("https://graphql.bitquery.io")
        assert is_valid_endpoint("https://streaming.bitquery.io/graphql")
        assert is_valid_endpoint("http://localhost:8080/graphql")
        assert not is_valid_endpoint("graphql.bitquery.io")
        assert not is_valid_endpoint("wss://streaming.bitquery.io/graphql")
        assert not is_valid_endpoint("http://[::1")
        assert not is_valid_endpoint(None)
