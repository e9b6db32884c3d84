"""Create sample CSV and TSV files for demonstration."""

import pandas as pd
from pathlib import Path

from unpivoter.formats import Format, encode, table_records

# Monthly sales in wide format
sales_data = {
    "ID": ["1", "2", "3", "4"],
    "Product": ["Widget A", "Widget B", "Widget, large", "Widget D"],
    "Jan": ["100", "150", "200", "175"],
    "Feb": ["120", "160", "210", "185"],
    "Mar": ["140", "155", "220", "190"],
}

# Notes with a tab inside a value, to show TSV escaping
notes_data = {
    "ID": ["1", "2"],
    "Note": ["checked\tok", "pending"],
    "Q1": ["15000", "22500"],
    "Q2": ["16500", "24000"],
}

output_dir = Path(__file__).parent

sales = pd.DataFrame(sales_data, dtype=object)
csv_file = output_dir / "sample_sales.csv"
csv_file.write_text(encode(table_records(sales, include_header=True), Format.CSV), encoding="utf-8")

notes = pd.DataFrame(notes_data, dtype=object)
tsv_file = output_dir / "sample_notes.tsv"
tsv_file.write_text(encode(table_records(notes, include_header=True), Format.TSV), encoding="utf-8")

# Same sales data without a header row
plain_file = output_dir / "sample_plain.csv"
plain_file.write_text(encode(table_records(sales), Format.CSV), encoding="utf-8")

print(f"Created sample files in: {output_dir}")
print("\nTry running:")
print(f'  unpivoter -f "{csv_file}" --headers --keys "ID,Product"')
print(f'  unpivoter -f "{tsv_file}" -H -k ID --var-name Quarter --verbose')
print(f'  unpivoter -f "{plain_file}" -k 0,1')
