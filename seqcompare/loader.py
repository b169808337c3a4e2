"""
Loading and writing comparison datasets.

A dataset is read either from the JSON document the comparison data
generator writes, or built from aligned FASTA files where every file (or
every NAME=path argument) is one group.

JSON layout:
    {
      "pos1": [145, 156, 190],
      "groups": [
        {"name": "2019",
         "pos1": {"145": [{"a": "K", "c": 12}, {"a": "N", "c": 3}], ...},
         "seq": [{"id": "A/HONG KONG/1/2019", "seq": "MKTIIALSYIL..."}, ...]},
        ...
      ]
    }
"""

import json
import logging
import os
import re
from typing import Any, Dict, List, Sequence, Tuple

from Bio import SeqIO
from tqdm import tqdm

from seqcompare.frequency import check_ranked, count_residues, diversity_positions, frequency_table
from seqcompare.types import (
    Dataset,
    DatasetError,
    FrequencyEntry,
    FrequencyTable,
    Group,
    SequenceRecord,
    position,
    residue,
)

DATA_JS_PREFIX = re.compile(r'^\s*(?:const|var|let)\s+([A-Za-z_$][\w$]*)\s*=\s*')


def _require(data: Dict[str, Any], key: str, where: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise DatasetError(f"{where}: missing '{key}'")
    return data[key]


def _parse_frequencies(raw: Any, group_name: str) -> FrequencyTable:
    if not isinstance(raw, dict):
        raise DatasetError(f"Group {group_name!r}: 'pos1' must be an object")
    table: FrequencyTable = {}
    for key, raw_entries in raw.items():
        try:
            pos1 = position(int(key))
        except (TypeError, ValueError):
            raise DatasetError(f"Group {group_name!r}: invalid position {key!r}")
        if not isinstance(raw_entries, list):
            raise DatasetError(f"Group {group_name!r} position {pos1}: entries must be a list")
        entries = []
        for raw_entry in raw_entries:
            aa = residue(_require(raw_entry, 'a', f"Group {group_name!r} position {pos1}"))
            count = _require(raw_entry, 'c', f"Group {group_name!r} position {pos1}")
            if isinstance(count, bool) or not isinstance(count, int):
                raise DatasetError(f"Group {group_name!r} position {pos1}: count must be an integer")
            entries.append(FrequencyEntry(aa, count))
        check_ranked(entries, pos1, group_name)
        table[pos1] = entries
    return table


def _parse_group(raw: Dict[str, Any], index: int) -> Group:
    name = str(_require(raw, 'name', f"Group {index}"))
    records = []
    for raw_record in _require(raw, 'seq', f"Group {name!r}"):
        seq_id = _require(raw_record, 'id', f"Group {name!r} sequence")
        seq = _require(raw_record, 'seq', f"Group {name!r} sequence {seq_id!r}")
        if not isinstance(seq, str):
            raise DatasetError(f"Group {name!r} sequence {seq_id!r}: 'seq' must be a string")
        records.append(SequenceRecord(str(seq_id), seq))
    return Group(name, records, _parse_frequencies(_require(raw, 'pos1', f"Group {name!r}"), name))


def dataset_from_json(data: Dict[str, Any]) -> Dataset:
    """Build a Dataset from parsed comparison JSON, raising DatasetError on malformed input."""
    raw_groups = _require(data, 'groups', "Dataset")
    if not isinstance(raw_groups, list):
        raise DatasetError("Dataset: 'groups' must be a list")
    raw_positions = data.get('pos1', [])
    if not isinstance(raw_positions, list):
        raise DatasetError("Dataset: 'pos1' must be a list")
    positions = [position(pos1) for pos1 in raw_positions]
    groups = [_parse_group(raw, index) for index, raw in enumerate(raw_groups)]
    return Dataset(groups, positions)


def dataset_to_json(dataset: Dataset) -> Dict[str, Any]:
    def group_to_json(group: Group) -> Dict[str, Any]:
        return {
            'name': group.name,
            'pos1': {str(pos1): [{'a': entry.residue, 'c': entry.count} for entry in entries]
                     for pos1, entries in group.pos1.items()},
            'seq': [{'id': record.id, 'seq': record.seq} for record in group.seq],
        }

    return {'pos1': list(dataset.pos1), 'groups': [group_to_json(group) for group in dataset.groups]}


def load_dataset(path: str) -> Dataset:
    """Read a dataset from a .json file or a .data.js file ("const name =\\n{...}")."""
    with open(path) as f:
        text = f.read()
    match = DATA_JS_PREFIX.match(text)
    if match:
        logging.debug(f"Reading data variable {match.group(1)} from {path}")
        text = text[match.end():].rstrip().rstrip(';')
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DatasetError(f"Cannot parse {path}: {e}")
    dataset = dataset_from_json(data)
    logging.info(f"Loaded {len(dataset.groups)} groups and {len(dataset.pos1)} diversity positions from {path}")
    return dataset


def variable_name_for(path: str) -> str:
    """JavaScript variable name for an html or .data.js output path."""
    for suffix in ('.data.js', '.html'):
        if path.endswith(suffix):
            prefix = path[:-len(suffix)]
            break
    else:
        prefix = os.path.splitext(path)[0]
    return 'compare_sequences_' + re.sub(r'[/\-.]', '_', prefix)


def write_data_js(path: str, dataset: Dataset, var_name: str, indent: int = 2) -> None:
    with open(path, 'w') as f:
        f.write(f"const {var_name} =\n{json.dumps(dataset_to_json(dataset), indent=indent)}")
    logging.info(f"Wrote {path}")


def parse_group_spec(spec: str) -> Tuple[str, str]:
    """Split "NAME=path" into (name, path); a bare path is named after its file."""
    name, sep, path = spec.partition('=')
    if sep and name and path:
        return name, path
    return os.path.splitext(os.path.basename(spec))[0], spec


def read_fasta_groups(specs: Sequence[str]) -> List[Tuple[str, List[SequenceRecord]]]:
    """Read aligned FASTA files, one group per file."""
    groups = []
    for spec in specs:
        name, path = parse_group_spec(spec)
        if not os.path.exists(path):
            raise DatasetError(f"FASTA file not found: {path}")
        records = [SequenceRecord(record.id, str(record.seq).upper()) for record in SeqIO.parse(path, "fasta")]
        logging.info(f"Loaded {len(records)} sequences for group {name!r} from {path}")
        groups.append((name, records))
    return groups


def build_dataset(named_records: Sequence[Tuple[str, List[SequenceRecord]]]) -> Dataset:
    """
    Build a dataset from groups of aligned sequences.

    Residues are counted per group and column. Positions where the groups
    together carry more than one residue become the diversity positions and
    each group's frequency table covers exactly those positions.
    """
    counters_by_group = {}
    for name, records in tqdm(named_records, desc="Counting residues", unit="group"):
        if name in counters_by_group:
            raise DatasetError(f"Duplicate group name: {name}")
        counters_by_group[name] = count_residues([record.seq for record in records])

    positions = diversity_positions(counters_by_group)
    logging.info(f"Found {len(positions)} positions with diversity")

    groups = [Group(name, list(records), frequency_table(counters_by_group[name], positions))
              for name, records in named_records]
    return Dataset(groups, positions)
