import pandas as pd
import numpy as np
import os

WORKLOAD_ORDER = ['Uniform', 'Zipf', 'Bursty', 'Phase']
NUMERIC_COLUMNS = ['hit_rate', 'memory_mb', 'cpu_time_delta', 'seconds',
                   'capacity_evictions', 'expired_evictions', 'sweep_evictions']


class ExcelLogger:
    def __init__(self, filename="cache_metrics.xlsx", overwrite=True):
        self.filename = filename
        self.records = {}
        # First export replaces a file left over from an earlier run
        self._clear_on_export = overwrite

    def log(self, step, hit_rate, hits, misses, memory_mb, cpu_time_delta, timestamp,
            size, cache_name, workload_name,
            capacity_evictions=0, expired_evictions=0, sweep_evictions=0):
        if cache_name not in self.records:
            self.records[cache_name] = []
        self.records[cache_name].append({
            "workload_name": workload_name,
            "step": step,
            "hit_rate": hit_rate,
            "hits": hits,
            "misses": misses,
            "memory_mb": memory_mb,
            "cpu_time_delta": cpu_time_delta,
            "seconds": timestamp,
            "size": size,
            "capacity_evictions": capacity_evictions,
            "expired_evictions": expired_evictions,
            "sweep_evictions": sweep_evictions
        })

    def _prepare(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.drop_duplicates(subset=['workload_name', 'step'], keep='first').copy()
        categories = WORKLOAD_ORDER + sorted(set(df['workload_name']) - set(WORKLOAD_ORDER))
        df['workload_name'] = pd.Categorical(df['workload_name'], categories=categories, ordered=True)
        df = df.sort_values(['workload_name', 'step'], kind='stable')
        for col in NUMERIC_COLUMNS:
            df[col] = df[col].astype(np.float64)
        return df

    def export(self):
        """Write logged records to the Excel file, one sheet per cache.

        Rows already in a sheet are kept; duplicates on (workload_name, step)
        keep the existing row.
        """
        if not self.records:
            return
        if self._clear_on_export and os.path.exists(self.filename):
            os.remove(self.filename)
        self._clear_on_export = False

        if os.path.exists(self.filename):
            existing = pd.read_excel(self.filename, sheet_name=None)
            with pd.ExcelWriter(self.filename, engine='openpyxl', mode='a', if_sheet_exists='replace') as writer:
                for cache_name, records in self.records.items():
                    df_new = pd.DataFrame(records)
                    if cache_name in existing:
                        df_combined = pd.concat([existing[cache_name], df_new], ignore_index=True)
                    else:
                        df_combined = df_new
                    self._prepare(df_combined).to_excel(writer, sheet_name=cache_name, index=False, float_format='%.15f')
        else:
            with pd.ExcelWriter(self.filename, engine='openpyxl') as writer:
                for cache_name, records in self.records.items():
                    df = self._prepare(pd.DataFrame(records))
                    df.to_excel(writer, sheet_name=cache_name, index=False, float_format='%.15f')
