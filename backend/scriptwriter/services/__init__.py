"""
Services package - Core business logic and integrations

Organized by domain responsibility:

Pipeline (Scriptwriting Flow):
    - pipeline/scriptwriting: source gathering, content extraction,
      component generation, script assembly, analysis, and the
      pipeline controller that sequences them

Infrastructure (Technical Concerns):
    - infrastructure/llm: LLM integration (Gemini, generation engine, cost tracking)
    - infrastructure/parsing: JSON recovery utilities
"""
