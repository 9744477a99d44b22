# financas/core/charts.py
import io
import datetime
from typing import Dict, List, Optional, Union

import matplotlib
matplotlib.use("Agg")  # sem display no servidor
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pandas as pd

from dateutil.relativedelta import relativedelta

from financas.core.aggregator import expenses_by_category, start_of_month
from financas.core.models import (
    Expense,
    FinancialSummary,
    Income,
    Investment,
    STATUS_PAID,
)

# Configurações globais para os gráficos
plt.style.use('seaborn-v0_8-darkgrid')
plt.rcParams['font.family'] = 'sans-serif'
plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14
plt.rcParams['legend.fontsize'] = 10

COLORS = {
    'Receita': '#28a745',
    'Despesa': '#dc3545',
    'Saldo': '#007bff',
    'Saques': '#fd7e14',
    'Investimentos': '#6f42c1',
    'Fatias_Variadas': ['#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd',
                        '#8c564b', '#e377c2', '#7f7f7f', '#bcbd22', '#17becf'],
}

_BRL_FORMATTER = mticker.FormatStrFormatter('R$%.2f')


def _to_png(fig) -> io.BytesIO:
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150)
    buf.seek(0)
    plt.close(fig)
    return buf


def generate_month_summary_chart(summary: FinancialSummary, title: str = "Resumo do mês") -> Union[io.BytesIO, None]:
    """Barras com receita, despesas pagas, saques, investimentos e saldos do mês."""
    values = {
        'Receita': summary.total_income,
        'Despesas pagas': summary.paid_expenses,
        'Saques': summary.total_withdrawals,
        'Investimentos': summary.total_investments,
        'Caixa empresa': summary.business_balance,
        'Disponível pessoal': summary.personal_balance,
    }
    if not any(values.values()):
        return None

    colors = [COLORS['Receita'], COLORS['Despesa'], COLORS['Saques'],
              COLORS['Investimentos'], COLORS['Saldo'], COLORS['Saldo']]

    fig, ax = plt.subplots(figsize=(10, 6))
    bars = ax.bar(list(values.keys()), list(values.values()), color=colors)
    ax.bar_label(bars, fmt='R$%.2f', fontsize=8, padding=3)
    ax.axhline(0, color='black', linewidth=0.8)
    ax.set_title(title, fontweight='bold')
    ax.set_ylabel('Valor (R$)')
    ax.yaxis.set_major_formatter(_BRL_FORMATTER)
    plt.setp(ax.get_xticklabels(), rotation=20, ha='right')
    fig.tight_layout()
    return _to_png(fig)


def generate_category_chart(expenses: List[Expense], type: Optional[str] = None,
                            title: str = "Despesas por categoria") -> Union[io.BytesIO, None]:
    """Barras horizontais com o total de despesas de cada categoria."""
    totals: Dict[str, float] = expenses_by_category(expenses, type=type)
    if not totals:
        return None

    series = pd.Series(totals).sort_values()
    fig, ax = plt.subplots(figsize=(10, max(4, 0.5 * len(series) + 2)))
    palette = COLORS['Fatias_Variadas']
    bars = ax.barh(series.index, series.values,
                   color=[palette[i % len(palette)] for i in range(len(series))])
    ax.bar_label(bars, fmt='R$%.2f', fontsize=8, padding=3)
    ax.set_title(title, fontweight='bold')
    ax.set_xlabel('Valor (R$)')
    ax.xaxis.set_major_formatter(_BRL_FORMATTER)
    fig.tight_layout()
    return _to_png(fig)


def build_evolution_frame(incomes: List[Income], expenses: List[Expense], investments: List[Investment],
                          months_back: int = 12, today: Optional[datetime.date] = None) -> pd.DataFrame:
    """
    Tabela mês a mês (últimos `months_back` meses até o mês de `today`) com
    receita recebida, despesas pagas, investimentos e saldo.
    """
    today = today or datetime.date.today()
    last_month = start_of_month(today)
    first_month = last_month - relativedelta(months=months_back - 1)
    periods = pd.period_range(start=pd.Timestamp(first_month), end=pd.Timestamp(last_month), freq='M')

    rows = []
    for income in incomes:
        if income.payment_date <= today:
            rows.append({'data': income.payment_date, 'tipo': 'Receita', 'valor': income.amount})
    for expense in expenses:
        if expense.status == STATUS_PAID:
            rows.append({'data': expense.due_date, 'tipo': 'Despesa', 'valor': expense.amount})
    for investment in investments:
        rows.append({'data': investment.date, 'tipo': 'Investimentos', 'valor': investment.amount})

    df = pd.DataFrame(rows, columns=['data', 'tipo', 'valor'])
    if not df.empty:
        df['mes_ano'] = pd.to_datetime(df['data']).dt.to_period('M')
        monthly = df.groupby(['mes_ano', 'tipo'])['valor'].sum().unstack(fill_value=0)
    else:
        monthly = pd.DataFrame()

    monthly = monthly.reindex(index=periods, columns=['Receita', 'Despesa', 'Investimentos'], fill_value=0)
    monthly = monthly.fillna(0)
    monthly['Saldo'] = monthly['Receita'] - monthly['Despesa'] - monthly['Investimentos']
    return monthly


def generate_evolution_chart(incomes: List[Income], expenses: List[Expense], investments: List[Investment],
                             months_back: int = 12,
                             today: Optional[datetime.date] = None) -> Union[io.BytesIO, None]:
    """Evolução mensal: receita x despesas pagas, com a linha do saldo."""
    monthly = build_evolution_frame(incomes, expenses, investments, months_back, today)
    if not monthly[['Receita', 'Despesa', 'Investimentos']].to_numpy().any():
        return None

    labels = [p.strftime('%m/%Y') for p in monthly.index]
    fig, ax = plt.subplots(figsize=(12, 7))
    monthly[['Receita', 'Despesa']].plot(
        kind='bar', ax=ax, color=[COLORS['Receita'], COLORS['Despesa']]
    )
    ax.plot(range(len(monthly)), monthly['Saldo'].values, color=COLORS['Saldo'],
            marker='o', label='Saldo')
    ax.set_xticks(range(len(monthly)))
    ax.set_xticklabels(labels, rotation=45, ha='right')
    ax.set_title('Evolução mensal', fontweight='bold')
    ax.set_ylabel('Valor (R$)')
    ax.set_xlabel('Mês/Ano')
    ax.yaxis.set_major_formatter(_BRL_FORMATTER)
    ax.legend(title='Tipo')
    fig.tight_layout()
    return _to_png(fig)
