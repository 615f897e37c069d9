from lambda_runtime_client.runtime.bootstrap import main

main()
