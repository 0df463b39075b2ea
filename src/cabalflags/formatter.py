"""Language and extension vocabulary understood by the formatter's parser.

This is deliberately a separate enumeration from the one in
``cabalflags.extensions``: the parser knows fewer extensions than Cabal does,
and a few legacy ones Cabal never had.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence


class Language(Enum):
    Haskell98 = "Haskell98"
    Haskell2010 = "Haskell2010"
    HaskellAllDisabled = "HaskellAllDisabled"


_KNOWN_EXTENSION_NAMES = (
    "OverlappingInstances",
    "UndecidableInstances",
    "IncoherentInstances",
    "InstanceSigs",
    "DoRec",
    "RecursiveDo",
    "ParallelListComp",
    "MultiParamTypeClasses",
    "MonomorphismRestriction",
    "FunctionalDependencies",
    "Rank2Types",
    "RankNTypes",
    "PolymorphicComponents",
    "ExistentialQuantification",
    "ScopedTypeVariables",
    "PatternSignatures",
    "ImplicitParams",
    "FlexibleContexts",
    "FlexibleInstances",
    "EmptyDataDecls",
    "CPP",
    "KindSignatures",
    "BangPatterns",
    "TypeSynonymInstances",
    "TemplateHaskell",
    "ForeignFunctionInterface",
    "Arrows",
    "Generics",
    "ImplicitPrelude",
    "NamedFieldPuns",
    "PatternGuards",
    "GeneralizedNewtypeDeriving",
    "DeriveAnyClass",
    "ExtensibleRecords",
    "RestrictedTypeSynonyms",
    "HereDocuments",
    "MagicHash",
    "BinaryLiterals",
    "TypeFamilies",
    "StandaloneDeriving",
    "UnicodeSyntax",
    "UnliftedFFITypes",
    "LiberalTypeSynonyms",
    "TypeOperators",
    "ParallelArrays",
    "RecordWildCards",
    "RecordPuns",
    "DisambiguateRecordFields",
    "OverloadedStrings",
    "GADTs",
    "MonoPatBinds",
    "RelaxedPolyRec",
    "ExtendedDefaultRules",
    "UnboxedTuples",
    "DeriveDataTypeable",
    "ConstrainedClassMethods",
    "PackageImports",
    "LambdaCase",
    "EmptyCase",
    "ImpredicativeTypes",
    "NewQualifiedOperators",
    "PostfixOperators",
    "QuasiQuotes",
    "TransformListComp",
    "ViewPatterns",
    "XmlSyntax",
    "RegularPatterns",
    "TupleSections",
    "GHCForeignImportPrim",
    "NPlusKPatterns",
    "DoAndIfThenElse",
    "RebindableSyntax",
    "ExplicitForAll",
    "DatatypeContexts",
    "MonoLocalBinds",
    "DeriveFunctor",
    "DeriveGeneric",
    "DeriveTraversable",
    "DeriveFoldable",
    "NondecreasingIndentation",
    "InterruptibleFFI",
    "CApiFFI",
    "JavaScriptFFI",
    "ExplicitNamespaces",
    "DataKinds",
    "PolyKinds",
    "MultiWayIf",
    "SafeImports",
    "Safe",
    "Trustworthy",
    "DefaultSignatures",
    "ConstraintKinds",
    "RoleAnnotations",
    "PatternSynonyms",
    "PartialTypeSignatures",
    "NamedWildCards",
    "TypeApplications",
    "TypeFamilyDependencies",
    "OverloadedLabels",
    "DerivingStrategies",
    "UnboxedSums",
    "TypeInType",
    "Strict",
    "StrictData",
    "DerivingVia",
    "QuantifiedConstraints",
    "BlockArguments",
    "TraditionalRecordSyntax",
)

KnownExtension = Enum(
    "KnownExtension", [(name, name) for name in _KNOWN_EXTENSION_NAMES]
)


@dataclass(frozen=True)
class EnableExtension:
    extension: KnownExtension


@dataclass(frozen=True)
class DisableExtension:
    extension: KnownExtension


@dataclass(frozen=True)
class UnknownExtension:
    name: str


type Extension = EnableExtension | DisableExtension | UnknownExtension


def _known(*names: str) -> tuple[KnownExtension, ...]:
    return tuple(KnownExtension[name] for name in names)


_HASKELL98_DEFAULTS = _known(
    "ImplicitPrelude",
    "MonomorphismRestriction",
    "DatatypeContexts",
    "NPlusKPatterns",
    "TraditionalRecordSyntax",
)

_HASKELL2010_DEFAULTS = _known(
    "ImplicitPrelude",
    "MonomorphismRestriction",
    "TraditionalRecordSyntax",
    "DoAndIfThenElse",
    "PatternGuards",
    "ForeignFunctionInterface",
    "EmptyDataDecls",
    "RelaxedPolyRec",
)

LANGUAGE_DEFAULTS: dict[Language, tuple[KnownExtension, ...]] = {
    Language.Haskell98: _HASKELL98_DEFAULTS,
    Language.Haskell2010: _HASKELL2010_DEFAULTS,
    Language.HaskellAllDisabled: (),
}

IMPLIED_EXTENSIONS: dict[KnownExtension, tuple[KnownExtension, ...]] = {
    KnownExtension.TypeFamilies: _known("KindSignatures"),
    KnownExtension.TypeFamilyDependencies: _known("TypeFamilies"),
    KnownExtension.ScopedTypeVariables: _known("ExplicitForAll"),
    KnownExtension.RankNTypes: _known("ExplicitForAll"),
    KnownExtension.Rank2Types: _known("ExplicitForAll"),
    KnownExtension.PolymorphicComponents: _known("ExplicitForAll"),
    KnownExtension.LiberalTypeSynonyms: _known("ExplicitForAll"),
    KnownExtension.ExistentialQuantification: _known("ExplicitForAll"),
    KnownExtension.ImpredicativeTypes: _known("RankNTypes"),
    KnownExtension.PolyKinds: _known("KindSignatures"),
    KnownExtension.TypeInType: _known("DataKinds", "PolyKinds", "KindSignatures"),
    KnownExtension.GADTs: _known("MonoLocalBinds"),
    KnownExtension.RecordWildCards: _known("DisambiguateRecordFields"),
    KnownExtension.DeriveTraversable: _known("DeriveFunctor", "DeriveFoldable"),
    KnownExtension.FunctionalDependencies: _known("MultiParamTypeClasses"),
    KnownExtension.MultiParamTypeClasses: _known("ConstrainedClassMethods"),
    KnownExtension.FlexibleInstances: _known("TypeSynonymInstances"),
    KnownExtension.XmlSyntax: _known("RegularPatterns"),
    KnownExtension.RegularPatterns: _known("PatternGuards"),
    KnownExtension.Strict: _known("StrictData"),
}


def _close_over_implications(
    extensions: Iterable[KnownExtension],
) -> list[KnownExtension]:
    result = list(extensions)
    index = 0
    while index < len(result):
        for implied in IMPLIED_EXTENSIONS.get(result[index], ()):
            if implied not in result:
                result.append(implied)
        index += 1
    return result


def to_extension_list(
    language: Language, extensions: Sequence[Extension]
) -> list[KnownExtension]:
    """Compute the extensions enabled for ``language`` plus ``extensions``.

    The dialect's defaults come first, then every explicit enable in order.
    A disable removes the extension wherever it was enabled before it.
    Unknown extensions cannot be enabled by the parser and are skipped.
    Extensions implied by the enabled ones are appended last.
    """
    enabled = list(LANGUAGE_DEFAULTS[language])
    for extension in extensions:
        if isinstance(extension, EnableExtension):
            if extension.extension not in enabled:
                enabled.append(extension.extension)
        elif isinstance(extension, DisableExtension):
            enabled = [known for known in enabled if known != extension.extension]
    return _close_over_implications(enabled)
