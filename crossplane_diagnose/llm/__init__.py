"""AI failure analysis for crossplane-diagnose."""

from crossplane_diagnose.llm.analyzer import Analyzer, build_analyzer, run_analysis
from crossplane_diagnose.llm.prompts import build_analysis_prompt

__all__ = ["Analyzer", "build_analysis_prompt", "build_analyzer", "run_analysis"]
