from legal_rag_client.main import bootstrap, create_app

__all__ = ["bootstrap", "create_app"]
