import unittest
from unittest.mock import MagicMock

import requests

from erapuzzle.core.exceptions import CatalogLoadError
from erapuzzle.data.loader import CatalogLoader, LoadState
from erapuzzle.io.remote import CatalogClient, is_remote

from sample_catalog import sample_documents


def fake_response(payload=None, error=None):
    response = MagicMock()
    if error is not None:
        response.raise_for_status.side_effect = error
    response.json.return_value = payload
    return response


class CatalogClientTests(unittest.TestCase):
    def test_is_remote(self) -> None:
        self.assertTrue(is_remote("https://example.org/words_en.json"))
        self.assertFalse(is_remote("assets/words_en.json"))

    def test_fetch_catalog(self) -> None:
        documents = sample_documents()
        session = MagicMock()
        session.get.side_effect = lambda url, timeout: fake_response(documents[url[-7:-5]])
        client = CatalogClient(timeout_seconds=3, session=session)

        catalog = client.fetch_catalog(
            {"en": "https://cdn.test/words_en.json", "tr": "https://cdn.test/words_tr.json"}
        )
        self.assertEqual(catalog.words("Renaissance", "tr"), ("RESSAM",))
        session.get.assert_any_call("https://cdn.test/words_en.json", timeout=3)

    def test_http_error_becomes_load_error(self) -> None:
        session = MagicMock()
        session.get.return_value = fake_response(error=requests.HTTPError("503"))
        client = CatalogClient(session=session)
        with self.assertRaises(CatalogLoadError):
            client.fetch_document("https://cdn.test/words_en.json")

    def test_connection_error_becomes_load_error(self) -> None:
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("offline")
        with self.assertRaises(CatalogLoadError):
            CatalogClient(session=session).fetch_document("https://cdn.test/words_en.json")

    def test_document_without_sets(self) -> None:
        session = MagicMock()
        session.get.return_value = fake_response({"eras": []})
        with self.assertRaises(CatalogLoadError):
            CatalogClient(session=session).fetch_document("https://cdn.test/words_en.json")

    def test_loader_retries_transient_failures(self) -> None:
        documents = sample_documents()
        responses = [
            fake_response(error=requests.HTTPError("502")),
            fake_response(documents["en"]),
        ]
        session = MagicMock()
        session.get.side_effect = lambda url, timeout: responses.pop(0)
        client = CatalogClient(session=session)
        loader = CatalogLoader(
            lambda: client.fetch_catalog({"en": "https://cdn.test/words_en.json"}),
            sleep=lambda _: None,
        )
        loader.load_now()
        self.assertEqual(loader.state, LoadState.READY)
        self.assertEqual(session.get.call_count, 2)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
