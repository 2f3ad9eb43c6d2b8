"""Return-to-sport (RTS) score after ACL reconstruction: fixed weighted sum, no I/O."""
import math

from medisocial.models.schemas import RTSMetrics, RTSScoreOut

WEIGHTS = {
    "limb_symmetry": 0.3,
    "hop_test": 0.3,
    "psychological_readiness": 0.2,
    "pain": 0.1,
    "rom": 0.1,
}


def pain_factor(pain_score: float) -> float:
    return max(0.0, 10 - pain_score) * 10


def rom_factor(flexion: float, extension: float) -> float:
    """Full marks only with flexion >= 130 and an extension deficit of at most 5 degrees."""
    return 100.0 if flexion >= 130 and extension <= 5 else 50.0


def compute_score(metrics: RTSMetrics) -> int:
    pain = pain_factor(metrics.pain_score)
    rom = rom_factor(metrics.rom_flexion, metrics.rom_extension)
    weighted = (
        metrics.limb_symmetry * WEIGHTS["limb_symmetry"]
        + metrics.hop_test * WEIGHTS["hop_test"]
        + metrics.psychological_readiness * WEIGHTS["psychological_readiness"]
        + pain * WEIGHTS["pain"]
        + rom * WEIGHTS["rom"]
    )
    # Half rounds up
    return math.floor(weighted + 0.5)


def status_label(score: int) -> str:
    if score >= 90:
        return "Apto"
    if score >= 75:
        return "Treino"
    return "Inapto"


def evaluate(metrics: RTSMetrics) -> RTSScoreOut:
    score = compute_score(metrics)
    return RTSScoreOut(
        score=score,
        label=status_label(score),
        pain_factor=pain_factor(metrics.pain_score),
        rom_factor=rom_factor(metrics.rom_flexion, metrics.rom_extension),
    )
