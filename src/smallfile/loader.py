import typing

import pandas as pd

from .model import LegacyRow

# Collapsed legacy header (lowercase, no spaces/underscores/punctuation) → LegacyRow field
RENAME_MAP = {
    "diseaseid": "disease_id",
    "diseasename": "disease_name",
    "geneid": "gene_id",
    "genename": "gene_name",
    "genotype": "genotype",
    "genesymbol": "gene_symbol",
    "phenotypeid": "phenotype_id",
    "phenotypename": "phenotype_name",
    "ageofonsetid": "age_of_onset_id",
    "ageofonsetname": "age_of_onset_name",
    "evidenceid": "evidence_id",
    "evidencename": "evidence_name",
    "frequency": "frequency",
    "sexid": "sex_id",
    "sexname": "sex_name",
    "negation": "negation_id",
    "negationid": "negation_id",
    "negationname": "negation_name",
    "description": "description",
    "pub": "pub",
    "publication": "pub",
    "assignedby": "assigned_by",
    "datecreated": "date_created",
    "evidence": "evidence",
    "entityid": "entity_id",
    "entityname": "entity_name",
    "qualityid": "quality_id",
    "qualityname": "quality_name",
    "addlentityid": "addl_entity_id",
    "addlentityname": "addl_entity_name",
    "abnormalid": "abnormal_id",
    "abnormalname": "abnormal_name",
    "orthologs": "orthologs",
    "sex": "sex",
}


def _is_blank(values: pd.Series) -> pd.Series:
    return values.isna() | values.astype(str).str.strip().eq("")


def normalize_legacy_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename the headers of an already tokenized legacy small-file table to `LegacyRow` fields:
      - drop a leading '#' and the parentheses around a qualifier ("Sex (ID)" → "sexid")
      - collapse case, whitespace, underscores and other punctuation
      - apply renames from RENAME_MAP
    Headers that land on the same field ("Pub" and "Publication") are merged into one
    column; the first non-empty cell from left to right wins.
    Unrecognized columns are kept under their collapsed name.
    """
    collapsed = (
        df.columns.astype(str)
        .str.strip()
        .str.lstrip("#")
        .str.replace(r"[^A-Za-z0-9]", "", regex=True)
        .str.lower()
    )
    merged: dict[str, pd.Series] = {}
    for position, name in enumerate(collapsed):
        target = RENAME_MAP.get(name, name)
        values = df.iloc[:, position]
        if target in merged:
            current = merged[target]
            merged[target] = current.mask(_is_blank(current), values)
        else:
            merged[target] = values
    return pd.DataFrame(merged, index=df.index)


def iter_legacy_rows(df: pd.DataFrame) -> typing.Iterator[LegacyRow]:
    """Yield one `LegacyRow` per table row, in table order."""
    working = normalize_legacy_columns(df)
    for _, row in working.iterrows():
        yield LegacyRow.from_mapping(row)
