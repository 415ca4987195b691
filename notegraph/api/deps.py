from fastapi import Request

from notegraph.services.graph_service import KnowledgeGraphService


def get_service(request: Request) -> KnowledgeGraphService:
    return request.app.state.graph_service
