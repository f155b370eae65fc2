from typing import Any, Dict, NamedTuple

from cosmpy.aerial.wallet import LocalWallet
from cosmpy.crypto.keypairs import PrivateKey
from cosmpy.mnemonic import derive_child_key_from_mnemonic

from deployment.chain import ChainClient
from deployment.constants import HD_PATH
from deployment.utils import query_node_chain_id, validate_chain_config


class Connection(NamedTuple):
    client: ChainClient
    wallet: Any
    address: str
    chain_id: str


def derive_wallet(mnemonic: str, prefix: str, hd_path: str = HD_PATH) -> LocalWallet:
    """Derives the signing wallet of the mnemonic on the given HD path."""
    private_key = derive_child_key_from_mnemonic(mnemonic, path=hd_path)
    return LocalWallet(PrivateKey(private_key), prefix=prefix)


def connect(mnemonic: str, chain_config: Dict) -> Connection:
    """
    Derives the deployer wallet, connects to the node and checks that
    the node serves the chain the config was written for.
    """
    validate_chain_config(chain_config)

    wallet = derive_wallet(mnemonic, prefix=chain_config["prefix"])
    address = str(wallet.address())
    print(f"Connected to {address}")

    fee_token = chain_config["feeToken"]
    try:
        client = ChainClient.from_config(chain_config)
        balance = client.balance(address, denom=fee_token)
        print(f"Balance: {balance} {fee_token}\n")

        chain_id = query_node_chain_id(chain_config["rpcEndpoint"])
        print(f"Chain ID: {chain_id}")

        if chain_id != chain_config["chainId"]:
            raise ValueError("Given ChainId doesn't match the client's ChainID!")
    except Exception as e:
        print(f"Error during connect: {e}")
        raise

    return Connection(client=client, wallet=wallet, address=address, chain_id=chain_id)
