"""
Result Exporter
===============
Serializes a MatchingResult into the JSON document handed to the persistence layer.

The document is written in one piece: teams and unmatched participants
together, so a retried run never persists half a result.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

from .matching_engine import MatchingResult, UnmatchedReport


class ResultExporter:
    """Generates JSON documents from matching results."""

    def __init__(self):
        self.timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    def to_document(self, result: MatchingResult,
                    unmatched_report: Optional[UnmatchedReport] = None) -> Dict:
        document = result.to_dict()
        document['generatedAt'] = self.timestamp
        if unmatched_report is not None:
            document['unmatchedAnalysis'] = unmatched_report.to_dict()
        return document

    def to_json(self, result: MatchingResult,
                unmatched_report: Optional[UnmatchedReport] = None, indent: int = 2) -> str:
        return json.dumps(self.to_document(result, unmatched_report), indent=indent, ensure_ascii=False)

    def save(self, result: MatchingResult, output_path: Union[str, Path],
             unmatched_report: Optional[UnmatchedReport] = None) -> Path:
        """
        Write the result document to disk.

        The file is written to a temporary sibling first and then moved into place.

        Returns:
            Path of the written file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = output_path.with_suffix(output_path.suffix + ".tmp")
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                f.write(self.to_json(result, unmatched_report))
            temp_path.replace(output_path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

        print(f"✅ Matching result saved to: {output_path}")
        return output_path
