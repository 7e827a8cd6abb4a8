"""
Identity Registry Module
Maps detector tracking IDs to their classifiers and evicts stale tracks
"""

import logging

from drowsiness_monitor.config import STALE_FRAMES
from drowsiness_monitor.drowsiness_classifier import DrowsinessClassifier

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """
    Identity-keyed store of DrowsinessClassifier instances.

    The detector may drop or reuse tracking IDs without notice, so entries
    are evicted once unseen for more than ``stale_frames`` frames.
    """

    def __init__(self, stale_frames=STALE_FRAMES, classifier_factory=DrowsinessClassifier):
        """
        Initialize registry.

        Args:
            stale_frames: Frames an identity may go unobserved before eviction
            classifier_factory: Zero-argument callable creating a fresh classifier
        """
        if stale_frames < 0:
            raise ValueError(f"stale_frames must be >= 0, got {stale_frames}")
        self.stale_frames = stale_frames
        self.classifier_factory = classifier_factory
        self._classifiers = {}
        self._last_seen = {}

    def __len__(self):
        return len(self._classifiers)

    def __contains__(self, identity):
        return identity in self._classifiers

    def get_or_create(self, identity, frame):
        """
        Look up (or create) the classifier for an identity and mark it seen.

        Args:
            identity: Detector tracking ID
            frame: Current frame number

        Returns:
            DrowsinessClassifier owned by this identity
        """
        classifier = self._classifiers.get(identity)
        if classifier is None:
            classifier = self.classifier_factory()
            self._classifiers[identity] = classifier
            logger.debug("Tracking new identity %s at frame %d", identity, frame)
        self._last_seen[identity] = frame
        return classifier

    def last_seen(self, identity):
        """Frame number at which the identity was last observed."""
        return self._last_seen.get(identity)

    def evict_stale(self, current_frame):
        """
        Remove identities not observed within the staleness window.

        Args:
            current_frame: Current frame number

        Returns:
            List of evicted identity keys
        """
        stale = [
            identity for identity, seen in self._last_seen.items()
            if current_frame - seen > self.stale_frames
        ]
        for identity in stale:
            classifier = self._classifiers.pop(identity)
            seen = self._last_seen.pop(identity)
            logger.debug(
                "Evicted identity %s (last seen frame %d, drowsy=%s)",
                identity, seen, classifier.is_drowsy,
            )
        return stale

    def verdicts(self):
        """Current verdict of every tracked identity."""
        return {identity: c.is_drowsy for identity, c in self._classifiers.items()}

    def identities(self):
        return list(self._classifiers)

    def clear(self):
        self._classifiers.clear()
        self._last_seen.clear()
