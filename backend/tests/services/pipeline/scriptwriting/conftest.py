import json

import pytest

from scriptwriter.models import ComponentSet, Source
from scriptwriter.services.infrastructure.llm import GenerationEngine


COMPONENTS_PAYLOAD = {
    "video_topic": "Morning routines",
    "target_audience": "Busy professionals",
    "core_problem_addressed": "Chaotic mornings",
    "sources_analyzed": ["Research Guide"],
    "hooks": [
        "Your morning is sabotaging you.",
        "Why do successful people wake up early?",
        "This one habit changed my mornings.",
    ],
    "bridges": [
        "Here's what the research says.",
        "Let me show you how.",
    ],
    "golden_nuggets": [
        {
            "title": "The 10-minute rule",
            "bullet_points": ["Wake at the same time", "Hydrate first", "Move for 10 minutes"],
        },
        {
            "title": "Plan the night before",
            "bullet_points": ["Lay out clothes", "Write 3 priorities", "Prep breakfast"],
        },
    ],
    "wtas": [
        "Follow for more routines.",
        "Comment your morning habit.",
    ],
}


@pytest.fixture
def components_payload():
    return json.loads(json.dumps(COMPONENTS_PAYLOAD))


@pytest.fixture
def components_json():
    return json.dumps(COMPONENTS_PAYLOAD)


@pytest.fixture
def components():
    return ComponentSet.model_validate(COMPONENTS_PAYLOAD)


@pytest.fixture
def sources():
    return [
        Source(id=f"source-{i}", title=f"Article {i}", link=f"https://example.com/{i}", snippet=f"Snippet {i}")
        for i in range(4)
    ]


@pytest.fixture
def make_engine(fake_provider, cost_tracker):
    """Engine factory bound to the scripted provider, one attempt per call"""
    def _make(step, max_retries=1):
        return GenerationEngine(step, provider=fake_provider, cost_tracker=cost_tracker, max_retries=max_retries)
    return _make
