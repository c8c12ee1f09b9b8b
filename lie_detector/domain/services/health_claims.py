"""Detection of health and medical claims."""

HEALTH_KEYWORDS = (
    # Medical conditions
    "cancer", "diabetes", "heart disease", "stroke", "alzheimer", "dementia",
    "depression", "anxiety", "obesity", "hypertension", "arthritis", "asthma",
    "covid", "coronavirus", "flu", "influenza", "vaccine", "vaccination",
    # Treatments
    "treatment", "therapy", "medication", "drug", "medicine", "cure",
    "antibiotic", "supplement", "vitamin", "remedy", "surgery",
    # Health behaviours
    "diet", "exercise", "sleep", "smoking", "alcohol", "caffeine",
    "nutrition", "calorie", "protein", "carbohydrate", "fat",
    # Body parts and systems
    "brain", "heart", "liver", "kidney", "lung", "immune system",
    "blood pressure", "cholesterol", "blood sugar", "metabolism",
    # Research terms
    "study", "research", "clinical trial", "patients", "symptoms",
    "risk", "cause", "prevent", "reduce", "increase", "improve",
    # Medical professionals
    "doctor", "physician", "scientist", "researcher", "medical",
)


def is_health_claim(claim_text: str) -> bool:
    """Check whether a claim touches health or medicine.

    Plain substring match against a fixed keyword list. This is a gate, not
    a score: a claim either qualifies for literature search or it does not.
    """
    lowered = claim_text.lower()
    return any(keyword in lowered for keyword in HEALTH_KEYWORDS)
