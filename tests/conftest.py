from typing import Any

import pytest

from cropdoc.diagnosis.models import DiagnosisContext, Location


@pytest.fixture()
def context() -> DiagnosisContext:
    return DiagnosisContext(
        crop_log_id="log-1",
        plant_id="plant-7",
        location=Location(latitude=52.52, longitude=13.40),
        user_id="user-42",
    )


@pytest.fixture()
def v3_response() -> dict[str, Any]:
    """Plant.id v3 health assessment with two disease suggestions sharing an image."""
    return {
        "result": {
            "is_plant": {"binary": True, "probability": 0.98},
            "is_healthy": {"binary": False, "probability": 0.08},
            "disease": {
                "suggestions": [
                    {
                        "name": "Fungi",
                        "probability": 0.72,
                        "details": {
                            "description": {"value": "Fungal infection of the leaves."},
                            "treatment": {
                                "chemical": ["Apply a copper fungicide."],
                                "prevention": ["Water at the base of the plant."],
                            },
                        },
                        "similar_images": [
                            {"url": "https://plant.id/img/a.jpg"},
                            {"url": "https://plant.id/img/b.jpg"},
                        ],
                    },
                    {
                        "name": "Water excess",
                        "probability": 0.21,
                        "similar_images": [
                            {"url": "https://plant.id/img/b.jpg"},
                            {"url": "https://plant.id/img/c.jpg"},
                        ],
                    },
                ],
                "question": {"text": "Is the leaf spotted?"},
            },
        },
        "status": "COMPLETED",
    }


@pytest.fixture()
def v2_response() -> dict[str, Any]:
    """Plant.id v2 response with a word-valued health flag."""
    return {
        "is_healthy": {"binary": "unhealthy", "probability": 35},
        "health_assessment": {
            "diseases": [
                {
                    "name": "Leaf spot",
                    "probability": 64,
                    "disease_details": {"treatment": "Remove infected leaves."},
                }
            ]
        },
        "suggestions": [{"plant_name": "Solanum lycopersicum", "probability": 0.91}],
    }
