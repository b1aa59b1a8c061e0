"""
Visualization of simulation results.
"""

from typing import Dict, Any, Optional, Union

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd


def _rounds_frame(results: Union[pd.DataFrame, Dict[str, Any]]) -> pd.DataFrame:
    """Accept a DataStorage frame or a results dictionary with a round history."""
    if isinstance(results, pd.DataFrame):
        return results
    rounds = results.get('history') or results.get('rounds') or []
    if not rounds:
        return pd.DataFrame()
    return pd.DataFrame(rounds).set_index('round')


def plot_epidemic_curve(results: Union[pd.DataFrame, Dict[str, Any]], save_path: Optional[str] = None):
    """
    Plot susceptible, infected and recovered agents per round.

    Args:
        results: Round data frame or results dictionary
        save_path: Optional path to save the plot

    Returns:
        The matplotlib figure
    """
    frame = _rounds_frame(results)
    fig, ax = plt.subplots(figsize=(10, 6))

    if not frame.empty:
        ax.plot(frame.index, frame['susceptible'], label='Susceptible', color='tab:blue')
        ax.plot(frame.index, frame['infected'], label='Infected', color='tab:red')
        ax.plot(frame.index, frame['recovered'], label='Recovered', color='tab:green')

    ax.set_xlabel('Round')
    ax.set_ylabel('Agents')
    ax.set_title('Epidemic curve')
    ax.legend()
    ax.grid(True, alpha=0.3)

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    return fig


def plot_network_evolution(results: Union[pd.DataFrame, Dict[str, Any]], save_path: Optional[str] = None):
    """
    Plot the average degree and tie churn per round.

    Args:
        results: Round data frame or results dictionary
        save_path: Optional path to save the plot

    Returns:
        The matplotlib figure
    """
    frame = _rounds_frame(results)
    fig, (ax_degree, ax_churn) = plt.subplots(2, 1, figsize=(10, 8), sharex=True)

    if not frame.empty:
        ax_degree.plot(frame.index, frame['av_degree'], color='tab:purple')
        ax_churn.bar(frame.index, frame['ties_added'], label='Ties added', color='tab:green')
        ax_churn.bar(frame.index, -frame['ties_removed'], label='Ties removed', color='tab:orange')

    ax_degree.set_ylabel('Average degree')
    ax_degree.grid(True, alpha=0.3)
    ax_churn.set_xlabel('Round')
    ax_churn.set_ylabel('Ties')
    ax_churn.legend()
    ax_churn.grid(True, alpha=0.3)

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    return fig
