from dataclasses import dataclass

from clauseradar.risk.models import Persona


@dataclass(frozen=True)
class PersonaProfile:
    persona: Persona
    label: str
    description: str


PERSONA_PROFILES: dict[Persona, PersonaProfile] = {
    Persona.TENANT: PersonaProfile(
        persona=Persona.TENANT,
        label="Tenant",
        description="Individual renting property",
    ),
    Persona.FREELANCER: PersonaProfile(
        persona=Persona.FREELANCER,
        label="Freelancer",
        description="Independent contractor",
    ),
    Persona.SMB: PersonaProfile(
        persona=Persona.SMB,
        label="Small Business",
        description="Small to medium business",
    ),
}


def persona_profile(persona: Persona) -> PersonaProfile:
    return PERSONA_PROFILES[persona]
