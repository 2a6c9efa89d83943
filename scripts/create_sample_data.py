#!/usr/bin/env python3
"""
Create a sample trial balance for trying out the variance analysis.
"""

import pandas as pd
from pathlib import Path


def create_sample_data():
    """Create sample trial balance Excel file."""

    trial_balance_data = {
        'Account Code': [
            '1000', '1010', '1100', '1200', '1300', '1500',
            '2000', '2100', '2200', '2500', '3000',
            '4000', '4100', '5000', '5100', '5200', '5300', '5400'
        ],
        'Account Description': [
            'Cash at Bank',
            'Petty Cash',
            'Accounts Receivable',
            'Inventory',
            'Prepaid Expenses',
            'Plant and Equipment',
            'Accounts Payable',
            'Accrued Liabilities',
            'GST Payable',
            'Term Loan',
            'Share Capital',
            'Sales Revenue',
            'Interest Income',
            'Cost of Sales',
            'Salaries and Wages',
            'Rent Expense',
            'Professional Fees',
            'Depreciation'
        ],
        'Balance (Current Year)': [
            245000, 1500, 412000, 198000, 18000, 860000,
            -231000, -64000, -22500, -500000, -300000,
            -2150000, -4200, 1290000, 540000, 96000, 61000, 86000
        ],
        'Balance (Prior Year)': [
            210000, 1500, 318000, 205000, 12000, 910000,
            -226000, -48000, -21000, 0, -300000,
            -1980000, -6100, 1170000, 505000, 96000, 38000, 91000
        ]
    }

    tb_df = pd.DataFrame(trial_balance_data)

    output_path = Path(__file__).parent.parent / "data" / "raw" / "sample_trial_balance.xlsx"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        tb_df.to_excel(writer, sheet_name='Trial Balance', index=False)

    print(f"Sample data created: {output_path}")
    return str(output_path)


if __name__ == "__main__":
    create_sample_data()
