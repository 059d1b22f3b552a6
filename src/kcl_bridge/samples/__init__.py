from .sample_processor import SampleRecordProcessor, checkpoint_with_retry

__all__ = ["SampleRecordProcessor", "checkpoint_with_retry"]
