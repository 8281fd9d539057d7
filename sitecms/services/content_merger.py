"""
Fusion du contenu JSON des blocks

Applique un patch partiel (édition depuis le dashboard admin) sur le contenu
déjà stocké d'un block (`content` ou `custom_styles`) :

1. le patch est ignoré en entier s'il est plus ancien que la valeur stockée
   (timestamp client `meta.clientUpdatedAt`, égalité = la valeur stockée gagne)
2. chaque clé du patch est classée via une MergePolicy (listes de champs fixes)
3. les clés absentes du patch sont conservées à tous les niveaux
4. le résultat est tamponné avec le timestamp client (ou maintenant)
5. un résultat identique à l'existant (hors tampon) n'est pas réécrit

Fonctions pures : aucun accès DB, les entrées ne sont jamais modifiées.
"""

import copy
import math
import time
from typing import Any, Iterable, Optional

META_KEY = "meta"
LEGACY_META_KEY = "_meta"  # anciens contenus
STAMP_KEY = "clientUpdatedAt"

REASON_STALE = "stale"
REASON_NO_CHANGE = "no-change"


class MergePolicy:
    """Listes de champs qui reçoivent un traitement spécial pendant la fusion"""

    def __init__(
        self,
        always_replace_arrays: Iterable[str] = (),
        always_update_fields: Iterable[str] = (),
        nested_object_fields: Iterable[str] = ()
    ):
        # tableau présent dans le patch => remplace, même vide ("aucun bouton")
        self.always_replace_arrays = frozenset(always_replace_arrays)
        # présent dans le patch => remplace, même "" ou null (effacement voulu)
        self.always_update_fields = frozenset(always_update_fields)
        # sous-objets fusionnés récursivement (padding.top ne doit pas effacer padding.bottom)
        self.nested_object_fields = frozenset(nested_object_fields)

    def extend(
        self,
        always_replace_arrays: Iterable[str] = (),
        always_update_fields: Iterable[str] = (),
        nested_object_fields: Iterable[str] = ()
    ) -> "MergePolicy":
        return MergePolicy(
            self.always_replace_arrays | frozenset(always_replace_arrays),
            self.always_update_fields | frozenset(always_update_fields),
            self.nested_object_fields | frozenset(nested_object_fields)
        )

    def __eq__(self, other):
        if not isinstance(other, MergePolicy):
            return NotImplemented
        return (
            self.always_replace_arrays == other.always_replace_arrays
            and self.always_update_fields == other.always_update_fields
            and self.nested_object_fields == other.nested_object_fields
        )

    def __hash__(self):
        return hash((self.always_replace_arrays, self.always_update_fields, self.nested_object_fields))

    def __repr__(self):
        return (
            f"MergePolicy(arrays={sorted(self.always_replace_arrays)}, "
            f"always_update={sorted(self.always_update_fields)}, "
            f"nested={sorted(self.nested_object_fields)})"
        )


DEFAULT_POLICY = MergePolicy(
    always_replace_arrays=["buttons", "hideOnMobile"],
    always_update_fields=[
        "title", "subtitle", "description", "mainTitle", "badge",
        "primaryButton", "secondaryButton",
        "trustIndicator", "trustIndicatorSubtext",
        "trustIndicatorSecondary", "trustIndicatorSecondarySubtext",
    ],
    nested_object_fields=[
        "titleHighlight", "titleStyles",
        "image", "video", "imageStyles", "gradientColors", "backgroundOverlay",
        "animations", "responsive", "elementAlignments", "trustIndicator",
        "padding", "scrollIndicator", "imageFloatingElements",
    ]
)


class MergeResult:
    """Résultat d'une fusion : appliquée (value) ou ignorée (reason)"""

    def __init__(self, applied: bool, value: Optional[dict] = None, reason: Optional[str] = None):
        self.applied = applied
        self.value = value
        self.reason = reason

    @property
    def is_stale(self) -> bool:
        return self.reason == REASON_STALE

    def to_dict(self) -> dict:
        if self.applied:
            return {"applied": True, "value": self.value}
        return {"applied": False, "reason": self.reason}

    def __eq__(self, other):
        if not isinstance(other, MergeResult):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        if self.applied:
            return f"MergeResult(applied=True, value={self.value!r})"
        return f"MergeResult(applied=False, reason={self.reason!r})"


def _as_object(value: Any) -> dict:
    # entrée mal formée (liste, scalaire, None) => objet vide
    return value if isinstance(value, dict) else {}


def as_timestamp(raw: Any) -> Optional[float]:
    """Convertit un timestamp client (epoch ms) ; None si absent ou invalide"""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        try:
            raw = int(raw)
        except ValueError:
            try:
                raw = float(raw)
            except ValueError:
                return None
    if not isinstance(raw, (int, float)):
        return None
    if isinstance(raw, float) and (math.isnan(raw) or math.isinf(raw)):
        return None
    return raw


def read_client_stamp(value: Any, include_legacy: bool = False) -> Optional[float]:
    """Lit meta.clientUpdatedAt (ou _meta.clientUpdatedAt pour les anciens contenus)"""
    value = _as_object(value)
    keys = [META_KEY, LEGACY_META_KEY] if include_legacy else [META_KEY]
    for key in keys:
        meta = value.get(key)
        if isinstance(meta, dict):
            stamp = as_timestamp(meta.get(STAMP_KEY))
            if stamp is not None:
                return stamp
    return None


def _fold_legacy_meta(patch: dict) -> dict:
    # _meta envoyé par les anciens éditeurs => fusionné dans meta, jamais stocké
    if LEGACY_META_KEY not in patch:
        return patch
    legacy = patch[LEGACY_META_KEY]
    folded = {key: value for key, value in patch.items() if key != LEGACY_META_KEY}
    if isinstance(legacy, dict):
        meta = folded.get(META_KEY)
        folded[META_KEY] = {**legacy, **meta} if isinstance(meta, dict) else dict(legacy)
    return folded


def strip_client_stamp(value: Any) -> dict:
    """Copie sans meta.clientUpdatedAt (meta vidé => retiré)"""
    result = copy.deepcopy(_as_object(value))
    meta = result.get(META_KEY)
    if isinstance(meta, dict):
        meta.pop(STAMP_KEY, None)
        if not meta:
            del result[META_KEY]
    return result


def _merge_into(target: dict, patch: dict, policy: MergePolicy) -> None:
    for key, value in patch.items():
        if key in policy.always_replace_arrays and isinstance(value, list):
            target[key] = copy.deepcopy(value)
            continue

        # un objet sur un champ "always update" (ex: trustIndicator) est fusionné plus bas
        if key in policy.always_update_fields and not isinstance(value, dict):
            target[key] = copy.deepcopy(value)
            continue

        if key in policy.nested_object_fields and isinstance(value, dict):
            _merge_child(target, key, value, policy)
            continue

        if value is None or value == "":
            continue

        if isinstance(value, dict):
            _merge_child(target, key, value, policy)
        else:
            target[key] = copy.deepcopy(value)


def _merge_child(target: dict, key: str, value: dict, policy: MergePolicy) -> None:
    child = target.get(key)
    if not isinstance(child, dict):
        child = {}
    target[key] = child
    _merge_into(child, value, policy)


def deep_merge(existing: Any, patch: Any, policy: MergePolicy = DEFAULT_POLICY) -> dict:
    """Fusion récursive sans contrôle de fraîcheur ni tampon"""
    result = copy.deepcopy(_as_object(existing))
    _merge_into(result, _as_object(patch), policy)
    return result


def apply_defaults(partial: Any, defaults: Any, policy: MergePolicy = DEFAULT_POLICY) -> dict:
    """Superpose un contenu partiel sur les valeurs par défaut d'un type de block"""
    return deep_merge(defaults, partial, policy)


def _now_ms() -> int:
    return int(time.time() * 1000)


def merge_content(
    existing: Any,
    patch: Any,
    client_timestamp: Any = None,
    policy: MergePolicy = DEFAULT_POLICY,
    now: Optional[int] = None
) -> MergeResult:
    """
    Calcule la prochaine valeur à stocker pour un champ JSON d'un block.

    `client_timestamp` (epoch ms) vient de la requête ; à défaut on lit
    `patch.meta.clientUpdatedAt`. `now` permet de fixer l'horloge (tests).
    """
    existing = _as_object(existing)
    patch = _as_object(patch)

    incoming_ts = as_timestamp(client_timestamp)
    if incoming_ts is None:
        incoming_ts = read_client_stamp(patch, include_legacy=True)
    patch = _fold_legacy_meta(patch)
    stored_ts = read_client_stamp(existing, include_legacy=True)

    # Contrôle de fraîcheur AVANT toute fusion : un patch périmé ne change rien
    if incoming_ts is not None and stored_ts is not None and incoming_ts <= stored_ts:
        return MergeResult(applied=False, reason=REASON_STALE)

    merged = deep_merge(existing, patch, policy)

    meta = merged.get(META_KEY)
    if not isinstance(meta, dict):
        meta = {}
        merged[META_KEY] = meta
    if incoming_ts is not None:
        meta[STAMP_KEY] = incoming_ts
    else:
        meta[STAMP_KEY] = now if now is not None else _now_ms()

    if strip_client_stamp(merged) == strip_client_stamp(existing):
        return MergeResult(applied=False, reason=REASON_NO_CHANGE)

    return MergeResult(applied=True, value=merged)
