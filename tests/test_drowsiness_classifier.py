"""Tests for the sliding-window drowsiness classifier."""

import numpy as np
import pytest

from drowsiness_monitor.observation import FaceObservation

OPEN = 0.9
CLOSED = 0.05


def feed(classifier, make_face, probs, **kwargs):
    return [classifier.observe(make_face(prob=p, **kwargs)) for p in probs]


class TestVerdict:
    def test_open_eyes_never_drowsy(self, small_classifier, make_face):
        c = small_classifier()
        verdicts = feed(c, make_face, [OPEN] * 30)
        assert not any(verdicts)
        assert c.closed_ratio == 0.0

    def test_sustained_closure_turns_drowsy_within_window(self, small_classifier, make_face):
        c = small_classifier()
        verdicts = feed(c, make_face, [CLOSED] * 10)

        # Insufficient evidence below min_valid_samples
        assert verdicts[:4] == [False] * 4
        assert verdicts[4] is True
        assert verdicts[-1] is True

    def test_below_drowsy_ratio_stays_awake(self, small_classifier, make_face):
        """6/10 closed never reaches the 0.7 entry threshold."""
        c = small_classifier()
        verdicts = feed(c, make_face, [OPEN] * 4 + [CLOSED] * 6)
        assert not any(verdicts)
        assert c.closed_ratio == pytest.approx(0.6)

    def test_hysteresis_keeps_drowsy_inside_band(self, small_classifier, make_face):
        c = small_classifier()
        feed(c, make_face, [CLOSED] * 10)
        assert c.is_drowsy

        # 6/10 closed: below entry ratio, above exit ratio
        feed(c, make_face, [OPEN] * 4)
        assert c.closed_ratio == pytest.approx(0.6)
        assert c.is_drowsy

        # 4/10 closed is not below 0.4 yet
        feed(c, make_face, [OPEN] * 2)
        assert c.is_drowsy

        assert c.observe(make_face(prob=OPEN)) is False
        assert c.closed_ratio == pytest.approx(0.3)

    def test_single_closed_frame_is_noise(self, small_classifier, make_face):
        c = small_classifier()
        verdicts = feed(c, make_face, [OPEN] * 7 + [CLOSED] + [OPEN] * 7)
        assert not any(verdicts)

    def test_deterministic_replay(self, small_classifier, make_face):
        rng = np.random.default_rng(7)
        probs = rng.uniform(0.0, 1.0, size=200).tolist()

        first = feed(small_classifier(), make_face, probs)
        second = feed(small_classifier(), make_face, probs)
        assert first == second

    def test_last_transition_records_timestamp(self, small_classifier, make_face):
        c = small_classifier(min_valid_samples=3)
        for i in range(3):
            c.observe(make_face(prob=CLOSED, timestamp=10.0 + i))
        assert c.is_drowsy
        assert c.last_transition == 12.0

    def test_reset(self, small_classifier, make_face):
        c = small_classifier()
        feed(c, make_face, [CLOSED] * 10)
        c.reset()
        assert not c.is_drowsy
        assert c.valid_samples == 0
        assert c.last_transition is None


class TestEvidence:
    def test_unknown_probabilities_do_not_count(self, small_classifier):
        c = small_classifier()
        for _ in range(20):
            assert c.observe(FaceObservation(track_id=1)) is False
        assert c.valid_samples == 0

    def test_unknown_frames_do_not_dilute_closure(self, small_classifier, make_face):
        c = small_classifier()
        for _ in range(5):
            c.observe(make_face(prob=CLOSED))
            c.observe(FaceObservation(track_id=1))
        assert c.valid_samples == 5
        assert c.closed_ratio == 1.0
        assert c.is_drowsy

    def test_single_known_eye_is_used(self, small_classifier):
        c = small_classifier()
        face = FaceObservation(track_id=1, left_eye_open=None, right_eye_open=0.1)
        assert c.eyes_closed(face) is True

    def test_min_combine(self, small_classifier, make_face):
        c = small_classifier(combine="min")
        assert c.eyes_closed(make_face(prob=0.9, right=0.1)) is True

    def test_mean_combine(self, small_classifier, make_face):
        c = small_classifier(combine="mean")
        assert c.eyes_closed(make_face(prob=0.9, right=0.1)) is False

    def test_out_of_range_probabilities_are_clamped(self, small_classifier, make_face):
        c = small_classifier()
        assert c.eyes_closed(make_face(prob=1.7, right=-0.3)) is True
        assert c.eyes_closed(make_face(prob=1.7, right=1.2)) is False

    def test_off_axis_pose_is_excluded(self, small_classifier, make_face):
        c = small_classifier()
        verdicts = feed(c, make_face, [CLOSED] * 20, pose=(60.0, 0.0, 0.0))
        assert not any(verdicts)
        assert c.valid_samples == 0

    def test_moderate_pose_is_used(self, small_classifier, make_face):
        c = small_classifier()
        assert c.eyes_closed(make_face(prob=CLOSED, pose=(15.0, -10.0, 5.0))) is True


class TestTimeWindow:
    def test_old_samples_expire(self, small_classifier, make_face):
        c = small_classifier(window_size=100, window_seconds=1.0, min_valid_samples=3)
        for t in (0.0, 0.1, 0.2):
            c.observe(make_face(prob=CLOSED, timestamp=t))
        assert c.is_drowsy

        assert c.observe(make_face(prob=OPEN, timestamp=5.0)) is False
        assert c.valid_samples == 1

    def test_frames_without_evidence_advance_window(self, small_classifier, make_face):
        """Unknown and off-axis frames still expire old samples."""
        c = small_classifier(window_size=100, window_seconds=1.0, min_valid_samples=3)
        for t in (0.0, 0.1, 0.2):
            c.observe(make_face(prob=CLOSED, timestamp=t))
        assert c.is_drowsy

        for t in np.arange(0.5, 60.0, 0.5):
            if int(t * 2) % 2:
                c.observe(FaceObservation(track_id=1, timestamp=float(t)))
            else:
                c.observe(make_face(prob=CLOSED, pose=(70.0, 0.0, 0.0), timestamp=float(t)))

        assert c.valid_samples == 0
        assert not c.is_drowsy


class TestConfiguration:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"window_size": 0},
            {"window_seconds": 0.0},
            {"drowsy_ratio": 0.3, "recover_ratio": 0.5},
            {"drowsy_ratio": 1.5},
            {"combine": "max"},
        ],
    )
    def test_invalid_configuration(self, small_classifier, overrides):
        with pytest.raises(ValueError):
            small_classifier(**overrides)

    def test_min_samples_capped_by_window(self, small_classifier):
        c = small_classifier(window_size=4, min_valid_samples=8)
        assert c.min_valid_samples == 4
