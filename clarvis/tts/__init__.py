from clarvis.tts.speaker import Speaker, should_cache

__all__ = ["Speaker", "should_cache"]
