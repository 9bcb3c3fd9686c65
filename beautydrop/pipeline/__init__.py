from .pipeline import DealPipeline, PipelineConfig, extract_deals

__all__ = ["DealPipeline", "PipelineConfig", "extract_deals"]
