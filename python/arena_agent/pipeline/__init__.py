from .orchestrator import DecisionPipeline, PipelineResult, PipelineStage

__all__ = ["DecisionPipeline", "PipelineResult", "PipelineStage"]
