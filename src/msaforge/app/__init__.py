from .pipeline import AlignmentPipeline, PipelineStep

__all__ = ["AlignmentPipeline", "PipelineStep"]
