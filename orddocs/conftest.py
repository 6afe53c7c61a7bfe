"""Pytest fixtures for orddocs tests."""

import textwrap
from pathlib import Path

import pytest

CLIENT_TS = """\
import { z } from 'zod';
import api from './api';
import { BlockHashSchema, InscriptionsIDsResponseSchema } from './schemas';
import type { BlockHash, InscriptionsIDsResponse } from './types';

export class OrdClient {
  private headers: HeadersInit;

  constructor(private baseUrl: string) {
    this.headers = { Accept: 'application/json' };
  }

  private async fetch<T extends z.ZodType>(endpoint: string, schema: T): Promise<z.infer<T>> {
    const response = await fetch(`${this.baseUrl}${endpoint}`, { headers: this.headers });
    return schema.parse(await response.json());
  }

  private async fetchPost<T extends z.ZodType, P extends object>(
    endpoint: string,
    payload: P,
    schema: T,
  ): Promise<z.infer<T>> {
    const response = await fetch(`${this.baseUrl}${endpoint}`, {
      method: 'POST',
      body: JSON.stringify(payload),
    });
    return schema.parse(await response.json());
  }

  /**
   * Gets the hash of a block at the specified height.
   *
   * @param {number} height - Block height to get hash for
   */
  async getBlockHashByHeight(height: number): Promise<BlockHash> {
    return this.fetch(api.getBlockHashByHeight(height), BlockHashSchema);
  }

  /**
   * Gets the latest block height using the recursive endpoint.
   */
  async getBlockHeightRecursive(): Promise<number> {
    return this.fetch(api.getBlockHeightRecursive, z.number().int().nonnegative());
  }

  /**
   * Fetches multiple inscriptions by their IDs.
   *
   * @param {string[]} ids - Inscription IDs
   */
  async getInscriptionsByIds(ids: string[]): Promise<InscriptionsIDsResponse> {
    return this.fetchPost(api.getInscriptionsByIds, ids, InscriptionsIDsResponseSchema);
  }

  async getServerStatus(): Promise<ServerStatus> {
    return this.fetch(api.getServerStatus, ServerStatusSchema);
  }

  _debug(): void {}
}
"""

API_TS = """\
const api = {
  getBlockHashByHeight: (height: number) => `/blockhash/${height}`,
  getBlockHeightRecursive: '/r/blockheight',
  getInscriptionsByIds: '/inscriptions',
  getServerStatus: '/status',
} as const;

export default api;
"""

STATUS_TS = """\
import { z } from 'zod';

const TimeSchema = z.object({
  secs: z.number().int().nonnegative(),
  nanos: z.number().int().nonnegative(),
});

export const ServerStatusSchema = z.object({
  chain: z.string(),
  height: z.number().int().nonnegative(),
  minimum_rune_for_next_block: z.string().nullable(),
  uptime: TimeSchema,
});

export const StatusSchema = z.enum(['active', 'inactive']);
"""

BLOCK_TS = """\
import { z } from 'zod';

export const BlockHashSchema = z.string().regex(/^[0-9a-f]{64}$/);

export const InscriptionsIDsResponseSchema = z.array(z.string());
"""

TYPES_TS = """\
import type { z } from 'zod';

/**
 * Status and statistics of the ord server.
 *
 * @param chain - Network the server indexes
 * @param height - Latest indexed block height
 */
export type ServerStatus = z.infer<typeof ServerStatusSchema>;

/**
 * Lifecycle state.
 */
export type Status = z.infer<typeof StatusSchema>;
"""


def write_project(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative path: source}`` under ``root``."""
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content))
    return root


@pytest.fixture
def ts_project(tmp_path):
    """
    A small TypeScript client project.

    Layout:
        src/client.ts        - OrdClient with public and private methods
        src/api.ts           - Path table
        src/schemas/*.ts     - zod schemas
        src/types/index.ts   - Central type descriptions
        src/client.test.ts   - Excluded from discovery
    """
    return write_project(
        tmp_path,
        {
            "src/client.ts": CLIENT_TS,
            "src/api.ts": API_TS,
            "src/schemas/status.ts": STATUS_TS,
            "src/schemas/block.ts": BLOCK_TS,
            "src/types/index.ts": TYPES_TS,
            "src/client.test.ts": "export class ClientTest { testIt(): void {} }\n",
        },
    )
