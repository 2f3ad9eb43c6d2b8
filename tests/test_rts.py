import pytest
from pydantic import ValidationError

from medisocial.errors import ValidationFailure
from medisocial.models.schemas import RTSMetrics
from medisocial.services import rts_calculator


def test_default_evaluation():
    result = rts_calculator.evaluate(RTSMetrics())

    assert result.pain_factor == 80
    assert result.rom_factor == 100
    assert result.score == 82  # 81.5 rounds half up
    assert result.label == "Treino"


def test_incomplete_range_of_motion_halves_rom_factor():
    metrics = RTSMetrics(rom_flexion=120)
    assert rts_calculator.rom_factor(metrics.rom_flexion, metrics.rom_extension) == 50
    assert rts_calculator.compute_score(metrics) == 77

    assert rts_calculator.rom_factor(135, 6) == 50


@pytest.mark.parametrize(
    "metrics,label",
    [
        (RTSMetrics(limb_symmetry=100, hop_test=100, psychological_readiness=100, pain_score=0), "Apto"),
        (RTSMetrics(limb_symmetry=90, hop_test=90, psychological_readiness=90, pain_score=0), "Apto"),
        (RTSMetrics(limb_symmetry=40, hop_test=40, psychological_readiness=30, pain_score=8), "Inapto"),
    ],
)
def test_labels(metrics, label):
    assert rts_calculator.evaluate(metrics).label == label


def test_label_boundaries():
    assert rts_calculator.status_label(90) == "Apto"
    assert rts_calculator.status_label(89) == "Treino"
    assert rts_calculator.status_label(75) == "Treino"
    assert rts_calculator.status_label(74) == "Inapto"


def test_out_of_range_metrics_are_rejected():
    with pytest.raises(ValidationError):
        RTSMetrics(pain_score=11)


async def test_save_requires_patient_name(studio):
    with pytest.raises(ValidationFailure):
        await studio.save_rts(RTSMetrics(patient_name="  "))
    assert studio.rts_history == []


async def test_saved_evaluations_are_newest_first_and_persisted(studio, store):
    first = await studio.save_rts(RTSMetrics(patient_name="Ana"))
    second = await studio.save_rts(RTSMetrics(patient_name="Bruno", rom_flexion=120))

    assert [e.patient_name for e in studio.rts_history] == ["Bruno", "Ana"]
    assert first.score == 82
    assert second.score == 77
    assert await store.load_rts_history() == studio.rts_history
