"""Application layer: ports (protocols), lifecycle hooks and use cases orchestrating the pipeline."""
