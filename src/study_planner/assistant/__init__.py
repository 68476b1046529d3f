"""
Assistant subsystem.

Components:
- models.py: AIResponse / AISuggestion and remote payload parsing
- intent.py: keyword intent classifier
- analyzer.py: aggregate statistics
- suggester.py: rule-based schedule and task suggestions
- bridge.py: remote suggestion bridges (HTTP relay, OpenAI-compatible LLM)
- orchestrator.py: remote-first answer with deterministic local fallback
"""
