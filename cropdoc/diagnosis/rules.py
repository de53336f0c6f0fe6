"""Precedence rules mapping vendor signals to a diagnosis outcome.

Signals are tried in PRECEDENCE order; the first rule that returns an outcome
with a non-empty label decides the diagnosis.
"""

import math
from collections.abc import Callable, Iterable
from dataclasses import replace

from cropdoc.diagnosis.models import (
    DiseaseSignal,
    HealthSignal,
    IdentificationSignal,
    NoSignal,
    RuleOutcome,
    Signal,
    VendorPayload,
)

UNKNOWN_LABEL = "Unknown Issue"
HEALTHY_LABEL = "Healthy"
UNHEALTHY_LABEL = "Unhealthy - unspecified"
IDENTIFIED_PREFIX = "Identified as: "

HEALTHY_MESSAGE = "Your plant appears healthy!"
UNHEALTHY_MESSAGE = (
    "The plant appears unhealthy, but a specific issue could not be identified. "
    "Please try a clearer photo or consult an expert."
)
IDENTIFIED_MESSAGE = "No specific health issue detected, but the plant is identified as {name}."
FALLBACK_MESSAGE = (
    "Could not identify a specific issue. Please retry with a clearer photo, "
    "a different angle, or consult an expert."
)

PRECEDENCE: tuple[type, ...] = (DiseaseSignal, HealthSignal, IdentificationSignal, NoSignal)


def normalize_probability(value: float | None, default: float = 0.0) -> float:
    """Bring a 0-1 or 0-100 probability onto the 0-1 scale."""
    if value is None or math.isnan(value):
        return default
    if value > 1:
        value = value / 100
    return min(1.0, max(0.0, value))


def extract_signals(payload: VendorPayload) -> tuple[Signal, ...]:
    """List the signals present in the payload, in precedence order."""
    present: list[Signal] = []
    if payload.disease_suggestions:
        present.append(DiseaseSignal(payload.disease_suggestions))
    if payload.is_healthy is not None:
        present.append(HealthSignal(payload.is_healthy))
    if payload.plant_suggestions:
        present.append(IdentificationSignal(payload.plant_suggestions))
    present.append(NoSignal())
    return tuple(sorted(present, key=lambda s: PRECEDENCE.index(type(s))))


def disease_rule(signal: DiseaseSignal) -> RuleOutcome | None:
    top = signal.suggestions[0]
    if not top.name:
        return None
    recommendations = ((top.description,) if top.description else ()) + top.treatment
    if not recommendations:
        recommendations = tuple(s.name for s in signal.suggestions if s.name)
    return RuleOutcome(
        pest_or_disease=top.name,
        confidence_level=normalize_probability(top.probability),
        recommendations=recommendations,
        related_images=_unique(url for s in signal.suggestions for url in s.similar_images),
    )


def health_rule(signal: HealthSignal) -> RuleOutcome:
    if signal.flag.binary:
        return RuleOutcome(
            pest_or_disease=HEALTHY_LABEL,
            confidence_level=normalize_probability(signal.flag.probability, default=1.0),
            recommendations=(HEALTHY_MESSAGE,),
        )
    return RuleOutcome(
        pest_or_disease=UNHEALTHY_LABEL,
        confidence_level=normalize_probability(signal.flag.probability),
        recommendations=(UNHEALTHY_MESSAGE,),
    )


def identification_rule(signal: IdentificationSignal) -> RuleOutcome | None:
    top = signal.suggestions[0]
    if not top.plant_name:
        return None
    return RuleOutcome(
        pest_or_disease=IDENTIFIED_PREFIX + top.plant_name,
        confidence_level=normalize_probability(top.probability),
        recommendations=(IDENTIFIED_MESSAGE.format(name=top.plant_name),),
        related_images=_unique(top.similar_images),
    )


def no_signal_rule(signal: NoSignal) -> RuleOutcome:
    _ = signal
    return RuleOutcome(pest_or_disease=UNKNOWN_LABEL)


RULES: dict[type, Callable[..., RuleOutcome | None]] = {
    DiseaseSignal: disease_rule,
    HealthSignal: health_rule,
    IdentificationSignal: identification_rule,
    NoSignal: no_signal_rule,
}


def apply_rules(payload: VendorPayload) -> tuple[Signal, RuleOutcome]:
    """Return the deciding signal and its outcome, with the fallback post-pass applied."""
    for signal in extract_signals(payload):
        outcome = RULES[type(signal)](signal)
        if outcome is not None and outcome.pest_or_disease:
            return signal, _with_fallback(outcome)
    # NoSignal always decides; unreachable unless RULES is changed
    raise RuntimeError("No diagnosis rule produced an outcome")


def _with_fallback(outcome: RuleOutcome) -> RuleOutcome:
    if outcome.recommendations:
        return outcome
    return replace(outcome, recommendations=(FALLBACK_MESSAGE,))


def _unique(urls: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(urls))
