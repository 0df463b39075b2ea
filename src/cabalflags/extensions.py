"""Languages and extensions as a Cabal manifest spells them."""

from dataclasses import dataclass
from enum import Enum


class KnownLanguage(Enum):
    Haskell98 = "Haskell98"
    Haskell2010 = "Haskell2010"
    GHC2021 = "GHC2021"
    GHC2024 = "GHC2024"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnknownLanguage:
    name: str

    def __str__(self) -> str:
        return self.name


type Language = KnownLanguage | UnknownLanguage


DEFAULT_LANGUAGE = KnownLanguage.Haskell98


_KNOWN_EXTENSION_NAMES = (
    "AllowAmbiguousTypes",
    "ApplicativeDo",
    "Arrows",
    "AutoDeriveTypeable",
    "BangPatterns",
    "BinaryLiterals",
    "BlockArguments",
    "CApiFFI",
    "CPP",
    "ConstrainedClassMethods",
    "ConstraintKinds",
    "DataKinds",
    "DatatypeContexts",
    "DefaultSignatures",
    "DeriveAnyClass",
    "DeriveDataTypeable",
    "DeriveFoldable",
    "DeriveFunctor",
    "DeriveGeneric",
    "DeriveLift",
    "DeriveTraversable",
    "DerivingStrategies",
    "DerivingVia",
    "DisambiguateRecordFields",
    "DoAndIfThenElse",
    "DoRec",
    "DuplicateRecordFields",
    "EmptyCase",
    "EmptyDataDecls",
    "EmptyDataDeriving",
    "ExistentialQuantification",
    "ExplicitForAll",
    "ExplicitNamespaces",
    "ExtendedDefaultRules",
    "ExtensibleRecords",
    "FieldSelectors",
    "FlexibleContexts",
    "FlexibleInstances",
    "ForeignFunctionInterface",
    "FunctionalDependencies",
    "GADTSyntax",
    "GADTs",
    "GHCForeignImportPrim",
    "GeneralizedNewtypeDeriving",
    "Generics",
    "HereDocuments",
    "HexFloatLiterals",
    "ImplicitParams",
    "ImplicitPrelude",
    "ImportQualifiedPost",
    "ImpredicativeTypes",
    "IncoherentInstances",
    "InstanceSigs",
    "InterruptibleFFI",
    "JavaScriptFFI",
    "KindSignatures",
    "LambdaCase",
    "LexicalNegation",
    "LiberalTypeSynonyms",
    "LinearTypes",
    "MagicHash",
    "MonadComprehensions",
    "MonoLocalBinds",
    "MonoPatBinds",
    "MonomorphismRestriction",
    "MultiParamTypeClasses",
    "MultiWayIf",
    "NPlusKPatterns",
    "NamedFieldPuns",
    "NamedWildCards",
    "NegativeLiterals",
    "NewQualifiedOperators",
    "NondecreasingIndentation",
    "NumDecimals",
    "NumericUnderscores",
    "OverlappingInstances",
    "OverloadedLabels",
    "OverloadedLists",
    "OverloadedRecordDot",
    "OverloadedRecordUpdate",
    "OverloadedStrings",
    "PackageImports",
    "ParallelArrays",
    "ParallelListComp",
    "PartialTypeSignatures",
    "PatternGuards",
    "PatternSignatures",
    "PatternSynonyms",
    "PolyKinds",
    "PolymorphicComponents",
    "PostfixOperators",
    "QualifiedDo",
    "QuantifiedConstraints",
    "QuasiQuotes",
    "Rank2Types",
    "RankNTypes",
    "RebindableSyntax",
    "RecordPuns",
    "RecordWildCards",
    "RecursiveDo",
    "RegularPatterns",
    "RelaxedPolyRec",
    "RestrictedTypeSynonyms",
    "RoleAnnotations",
    "Safe",
    "SafeImports",
    "ScopedTypeVariables",
    "StandaloneDeriving",
    "StandaloneKindSignatures",
    "StarIsType",
    "StaticPointers",
    "Strict",
    "StrictData",
    "TemplateHaskell",
    "TemplateHaskellQuotes",
    "TraditionalRecordSyntax",
    "TransformListComp",
    "Trustworthy",
    "TupleSections",
    "TypeApplications",
    "TypeData",
    "TypeFamilies",
    "TypeFamilyDependencies",
    "TypeInType",
    "TypeOperators",
    "TypeSynonymInstances",
    "UnboxedSums",
    "UnboxedTuples",
    "UndecidableInstances",
    "UndecidableSuperClasses",
    "UnicodeSyntax",
    "UnliftedDatatypes",
    "UnliftedFFITypes",
    "UnliftedNewtypes",
    "Unsafe",
    "ViewPatterns",
    "XmlSyntax",
)

KnownExtension = Enum(
    "KnownExtension", [(name, name) for name in _KNOWN_EXTENSION_NAMES]
)


@dataclass(frozen=True)
class EnableExtension:
    extension: KnownExtension

    def __str__(self) -> str:
        return self.extension.name


@dataclass(frozen=True)
class DisableExtension:
    extension: KnownExtension

    def __str__(self) -> str:
        return f"No{self.extension.name}"


@dataclass(frozen=True)
class UnknownExtension:
    name: str

    def __str__(self) -> str:
        return self.name


type Extension = EnableExtension | DisableExtension | UnknownExtension


def classify_language(name: str) -> Language:
    try:
        return KnownLanguage[name]
    except KeyError:
        return UnknownLanguage(name)


def classify_extension(name: str) -> Extension:
    """Classify an extension token the way Cabal does.

    ``Foo`` enables a known ``Foo``, ``NoFoo`` disables it, and anything
    else, including ``No`` in front of an unknown name, stays unknown.
    """
    if name in KnownExtension.__members__:
        return EnableExtension(KnownExtension[name])
    if name.startswith("No") and name[2:] in KnownExtension.__members__:
        return DisableExtension(KnownExtension[name[2:]])
    return UnknownExtension(name)
