"""Service layer: store operations behind the dispatch API views."""
