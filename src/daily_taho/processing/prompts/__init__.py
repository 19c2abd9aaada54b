from .summary_prompt import build_batch_prompt, build_english_prompt, build_filipino_prompt

__all__ = ["build_batch_prompt", "build_english_prompt", "build_filipino_prompt"]
