# src/covserve/application/asset_bootstrapper.py
import logging
from pathlib import Path
from typing import TextIO
from dataclasses import dataclass
from returns.result import safe

from ..infrastructure.fs import IFileSystem
from ..infrastructure.static_site import INDEX_DOCUMENT

PLACEHOLDER_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Coverage Report</title>
    <style>
        body {
            font-family: Arial, sans-serif;
            line-height: 1.6;
            margin: 0;
            padding: 20px;
            color: #333;
        }
        .container {
            max-width: 800px;
            margin: 0 auto;
            background-color: #f9f9f9;
            padding: 20px;
            border-radius: 5px;
            box-shadow: 0 2px 5px rgba(0,0,0,0.1);
        }
        h1 {
            color: #2c3e50;
            border-bottom: 1px solid #ddd;
            padding-bottom: 10px;
        }
        .message {
            background-color: #e7f2fa;
            border-left: 4px solid #3498db;
            padding: 15px;
            margin: 20px 0;
        }
        .hint {
            background-color: #fef5e7;
            border-left: 4px solid #f39c12;
            padding: 15px;
            margin: 20px 0;
        }
    </style>
</head>
<body>
    <div class="container">
        <h1>Coverage Report Placeholder</h1>
        <div class="message">
            <p>No coverage reports have been generated yet.</p>
            <p>Press Enter in the terminal to run the coverage tests.</p>
        </div>
        <div class="hint">
            <p>After the coverage tests complete successfully, refresh this page to see the actual coverage report.</p>
        </div>
    </div>
</body>
</html>
"""


@dataclass(frozen=True)
class AssetBootstrapper:
    fs: IFileSystem
    output: TextIO
    logger: logging.Logger

    @safe
    def ensure_assets(self, html_dir: Path) -> Path:
        """
        Make sure `html_dir` exists and holds an index document, so the
        server has something to show before the first coverage run.
        An existing index is left alone.
        """
        if self.fs.ensure_dir(html_dir):
            print(f"Creating directory: {html_dir}", file=self.output)
            self.logger.info("Created html directory %s", html_dir)

        index_path = html_dir / INDEX_DOCUMENT
        if self.fs.write_if_absent(index_path, PLACEHOLDER_HTML):
            print(f"Creating empty {INDEX_DOCUMENT} file in: {html_dir}", file=self.output)
            self.logger.info("Wrote placeholder %s", index_path)

        return index_path
