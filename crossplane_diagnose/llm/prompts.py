"""Prompt template for AI failure analysis.

The failure summary is embedded verbatim; its "Top Parent", "Child" and
"Reason:" lines are what the model is asked to reason about.
"""

from __future__ import annotations

ANALYSIS_PROMPT_TEMPLATE: str = """\
You are a Crossplane and Kubernetes site reliability engineer.
Analyze the diagnostic summary below, which lists failing composite resources
and the unhealthy resources beneath them, and give actionable debugging steps.

CONTEXT:
- Each "Top Parent" line names a composite resource (XR).
- Each "Child" line names an unhealthy resource in that composite's tree,
  followed by the condition or event that best explains it ("Reason:").
- Frequent causes in Crossplane control planes:
  1. Missing or misconfigured ProviderConfigs, or providers that are not installed/healthy.
  2. Composition selection problems (labels, composition revisions, function pipelines).
  3. Connection secret problems (writeConnectionSecretToRef).
  4. RBAC problems for provider service accounts.
  5. Errors returned by the cloud provider API (AWS, GCP, Azure).
- A status of "Cycle detected" means the resource references one of its own ancestors.
- A status starting with "Error fetching" means the resource could not be read at all.

INSTRUCTIONS:
1. Work through the "Reason" of every failing resource.
2. Name the most likely root cause, distinguishing causes from downstream symptoms.
3. Suggest specific kubectl commands to confirm it (for example
   'kubectl describe <kind> <name>' or 'kubectl get events').
4. Where it applies, suggest YAML or configuration changes.
5. Be concise and start with the most critical failure.

DIAGNOSTIC SUMMARY:
{summary}
"""


def build_analysis_prompt(summary: str) -> str:
    """Return the analysis prompt with *summary* embedded verbatim."""
    return ANALYSIS_PROMPT_TEMPLATE.format(summary=summary)
