"""
Domain Entities

Defines the labeled utterance produced by a batch evaluation.
"""

from dataclasses import dataclass, field


@dataclass
class Entity:
    """Entity found in an utterance"""
    entity_type: str
    match_text: str
    match_index: int = 0

    def to_dict(self) -> dict:
        """Convert to the utterance JSON entity shape"""
        return {
            "entity": self.entity_type,
            "matchText": self.match_text,
            "matchIndex": self.match_index,
        }


@dataclass
class LabeledUtterance:
    """Utterance with the intent and entities the NLU model predicted"""
    text: str
    intent: str | None
    entities: list[Entity] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to the utterance JSON shape"""
        return {
            "text": self.text,
            "intent": self.intent,
            "entities": [entity.to_dict() for entity in self.entities],
        }
