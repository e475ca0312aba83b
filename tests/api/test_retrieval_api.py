"""
Tests for the retrieval API endpoint.
"""

from knowledge_core.core.exceptions import RetrievalError
from knowledge_core.models import RetrievalResult


class TestRetrieveEndpoint:
    def test_retrieve(self, client, retrieval_service):
        retrieval_service.retrieve.return_value = RetrievalResult(
            query="What is Alpha?",
            graph_context="Knowledge Graph Context:\nAlpha --[uses]--> Beta",
        )

        response = client.post("/api/v1/retrieve", json={"query": "What is Alpha?", "k": 3})

        assert response.status_code == 200
        body = response.json()
        assert body["result"]["query"] == "What is Alpha?"
        assert body["result"]["graph_context"].startswith("Knowledge Graph Context:")
        assert body["prompt_context"] == "rendered context"
        retrieval_service.retrieve.assert_awaited_once_with("What is Alpha?", 3)

    def test_default_k(self, client, retrieval_service):
        retrieval_service.retrieve.return_value = RetrievalResult.empty("q")

        response = client.post("/api/v1/retrieve", json={"query": "q"})

        assert response.status_code == 200
        retrieval_service.retrieve.assert_awaited_once_with("q", None)

    def test_k_out_of_range(self, client, retrieval_service):
        response = client.post("/api/v1/retrieve", json={"query": "q", "k": 0})

        assert response.status_code == 422
        retrieval_service.retrieve.assert_not_awaited()

    def test_retrieval_error(self, client, retrieval_service):
        retrieval_service.retrieve.side_effect = RetrievalError("Query must not be empty", query=" ")

        response = client.post("/api/v1/retrieve", json={"query": " "})

        assert response.status_code == 422
        assert response.json()["detail"] == "Query must not be empty"
