"""
Tests for knowledge graph API endpoints.
"""

from datetime import datetime, timezone
from uuid import uuid4

from knowledge_core.core.exceptions import DocumentNotFoundError, EntityNotFoundError
from knowledge_core.models import (
    DocumentGraph,
    EmbeddingStats,
    EntityDetails,
    EntityView,
    GraphData,
    GraphEdge,
    GraphNode,
    GraphStats,
    MentioningDocument,
)


class TestGraphEndpoints:
    def test_stats(self, client, graph_service):
        graph_service.get_graph_stats.return_value = GraphStats(
            entity_count=2, relationship_count=1, relation_types={"uses": 1}
        )

        response = client.get("/api/v1/graph/stats")

        assert response.status_code == 200
        assert response.json() == {
            "entity_count": 2,
            "relationship_count": 1,
            "relation_types": {"uses": 1},
        }

    def test_graph_data(self, client, graph_service):
        alpha, beta = uuid4(), uuid4()
        graph_service.get_graph_data.return_value = GraphData(
            nodes=[
                GraphNode(id=alpha, name="Alpha", type="technology", mention_count=3),
                GraphNode(id=beta, name="Beta", type="technology"),
            ],
            edges=[
                GraphEdge(
                    source_id=alpha,
                    target_id=beta,
                    source="Alpha",
                    target="Beta",
                    relation_type="uses",
                )
            ],
        )

        response = client.get("/api/v1/graph")

        assert response.status_code == 200
        body = response.json()
        assert [(n["name"], n["mention_count"]) for n in body["nodes"]] == [
            ("Alpha", 3),
            ("Beta", 0),
        ]
        assert body["edges"][0]["source_id"] == str(alpha)

    def test_embedding_stats(self, client, graph_service):
        graph_service.get_embedding_stats.return_value = EmbeddingStats(
            document_count=2,
            chunk_count=5,
            cache_entry_count=4,
            embedded_chunks=4,
            pending_chunks=1,
            unique_content_hashes=4,
            duplicate_chunks=1,
            avg_chunks_per_document=2.5,
            avg_tokens_per_chunk=120.0,
            entity_count=3,
            entities_with_embeddings=2,
            entities_without_embeddings=1,
        )

        response = client.get("/api/v1/graph/embedding-stats")

        assert response.status_code == 200
        body = response.json()
        assert (body["embedded_chunks"], body["pending_chunks"]) == (4, 1)
        assert body["entities_without_embeddings"] == 1
        assert body["avg_chunks_per_document"] == 2.5

    def test_document_graph(self, client, graph_service):
        document_id, alpha, beta = uuid4(), uuid4(), uuid4()
        graph_service.get_document_graph.return_value = DocumentGraph(
            document_id=document_id,
            entities=[
                EntityView(id=alpha, name="Alpha", type="technology"),
                EntityView(id=beta, name="Beta", type="technology"),
            ],
            edges=[
                GraphEdge(
                    source_id=alpha,
                    target_id=beta,
                    source="Alpha",
                    target="Beta",
                    relation_type="uses",
                )
            ],
        )

        response = client.get(f"/api/v1/graph/documents/{document_id}")

        assert response.status_code == 200
        assert [e["name"] for e in response.json()["entities"]] == ["Alpha", "Beta"]
        assert response.json()["edges"][0]["relation_type"] == "uses"

    def test_document_graph_not_found(self, client, graph_service):
        graph_service.get_document_graph.side_effect = DocumentNotFoundError("x")

        response = client.get(f"/api/v1/graph/documents/{uuid4()}")

        assert response.status_code == 404

    def test_entity_details(self, client, graph_service):
        entity_id = uuid4()
        graph_service.get_entity_details.return_value = EntityDetails(
            entity=EntityView(id=entity_id, name="Alpha", type="technology"),
            documents=[
                MentioningDocument(id=uuid4(), title="Notes", created_at=datetime.now(timezone.utc))
            ],
        )

        response = client.get(f"/api/v1/graph/entities/{entity_id}")

        assert response.status_code == 200
        assert response.json()["entity"]["name"] == "Alpha"
        assert response.json()["documents"][0]["title"] == "Notes"

    def test_entity_not_found(self, client, graph_service):
        graph_service.get_entity_details.side_effect = EntityNotFoundError("x")

        response = client.get(f"/api/v1/graph/entities/{uuid4()}")

        assert response.status_code == 404
